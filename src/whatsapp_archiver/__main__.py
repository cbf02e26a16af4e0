"""Allow ``python -m whatsapp_archiver``."""

from whatsapp_archiver.cli.main import main

if __name__ == "__main__":
    main()
