from dark_mode_toggle.app import main

if __name__ == "__main__":
    main()
