from danf_generator.pipeline import main

if __name__ == "__main__":
    main()
