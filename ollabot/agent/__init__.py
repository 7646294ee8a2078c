"""Agent loop: context log, intents and the reducer that drives them."""
