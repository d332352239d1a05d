from cclog.cli import main

main()
