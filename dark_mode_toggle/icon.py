import math

from PIL import Image, ImageDraw

ICON_SIZE = 64


def build_icon_image(is_light: bool) -> Image.Image:
    img = Image.new("RGBA", (ICON_SIZE, ICON_SIZE), (0, 0, 0, 0))
    d = ImageDraw.Draw(img)

    if is_light:
        cx = 32
        cy = 32
        ray_inner = 17
        ray_outer = 27
        ray_color = (236, 173, 35, 255)
        for i in range(8):
            a = i * math.pi / 4.0
            x1 = cx + math.cos(a) * ray_inner
            y1 = cy + math.sin(a) * ray_inner
            x2 = cx + math.cos(a) * ray_outer
            y2 = cy + math.sin(a) * ray_outer
            d.line((x1, y1, x2, y2), fill=ray_color, width=4)

        d.ellipse((15, 15, 49, 49), fill=(249, 193, 47, 255))
        d.ellipse((21, 21, 43, 43), fill=(255, 224, 120, 255))
        return img

    # Crescent: a full disc with an offset transparent disc cut out of it.
    d.ellipse((10, 10, 54, 54), fill=(214, 219, 232, 255))
    d.ellipse((24, 4, 62, 42), fill=(0, 0, 0, 0))
    return img
