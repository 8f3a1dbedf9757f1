"""
Reset the deck database.

DANGEROUS: This deletes all decks, cards and review history!
Only use when you want to start fresh for testing.

Usage:
    python -m scripts.maintenance.reset_deck_db
"""

from flashdeck import config
from flashdeck import sm2

def main():
    print("=" * 60)
    print("WARNING: Reset Deck Database")
    print("=" * 60)
    print()
    print(f"Database: {config.get_database_url()}")
    print()
    print("This will DELETE:")
    print("  - All decks and cards (SM-2 state included)")
    print("  - All review events (logs of past reviews)")
    print()

    response = input("Are you sure you want to reset? (type 'yes' to confirm): ")

    if response.lower() == "yes":
        print("\nResetting database...")
        sm2.reset_db()
        print("✓ Database reset complete!")
        print("\nThe database now has empty tables ready for new decks.")
    else:
        print("\nCancelled. No changes made.")


if __name__ == "__main__":
    main()
