"""Context extraction from Sire source trees."""
