from api_changelog.cli.main import main

main()
