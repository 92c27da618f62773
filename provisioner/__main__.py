from .Installer import main

# Run the installer
main()
