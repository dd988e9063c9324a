from datetime import time


def is_within_light_window(now: time, start: time, end: time) -> bool:
    # start == end takes the first branch and is an empty window.
    if start <= end:
        return start <= now < end
    return now >= start or now < end
