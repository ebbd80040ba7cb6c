"""Shop prices and catalogs."""

ROD_UPGRADE_BASE_PRICE = 100
ROD_UPGRADE_PRICE_PER_LEVEL = 120
ENCHANT_ROLL_PRICE = 250

# (id, display name, price)
BOAT_SHOP = (
    ("wooden", "Old Rowboat", 0),
    ("fiberglass", "Speedboat", 1500),
    ("yacht", "Luxury Yacht", 8000),
)

ROD_SKINS = (
    ("default", "Standard", 0),
    ("carbon", "Carbon Fiber", 500),
    ("bamboo", "Zen Bamboo", 800),
    ("magma", "Magma Forged", 2500),
    ("cyber", "Cyberpunk 2077", 5000),
    ("samurai", "Ronin Blade", 3500),
    ("bone", "Leviathan Bone", 4000),
)
