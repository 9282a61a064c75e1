"""Daily priority aging and streak maintenance for markdown to-do files."""
