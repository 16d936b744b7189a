from draft_release.cli.app import main

if __name__ == "__main__":
    main()
