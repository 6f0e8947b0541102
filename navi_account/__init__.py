"""Account client for the NAVI lending protocol on Sui."""
