from reporter.main import main

main()
