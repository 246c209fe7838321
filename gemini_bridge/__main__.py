from gemini_bridge.api.main import main

if __name__ == "__main__":
    main()
