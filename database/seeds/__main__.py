from database.seeds.orchestrator import main

if __name__ == "__main__":
    main()
