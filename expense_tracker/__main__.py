from expense_tracker.cli.main import main

main()
