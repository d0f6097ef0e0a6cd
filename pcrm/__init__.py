"""pcrm - personal CRM task board for the terminal."""
