from foundry_release_url.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
