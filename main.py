from kennel_pedigree.cli import app

if __name__ == "__main__":
    app()
