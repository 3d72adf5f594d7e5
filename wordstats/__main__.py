from wordstats.cli.main import main

main()
