from webwasp.cli import main

main()
