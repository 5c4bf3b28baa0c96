from dispatch.cli.app import main

main()
