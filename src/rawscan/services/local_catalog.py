"""Bundled products served when remote providers have nothing."""

from rawscan.domain.products import Nutriments, Product

LOCAL_PRODUCTS: tuple[Product, ...] = (
    Product(
        barcode="049000028391",
        name="Coca-Cola Classic",
        brand="Coca-Cola",
        category="beverages",
        ingredients=(
            "Carbonated water, high fructose corn syrup, caramel color, "
            "phosphoric acid, natural flavors, caffeine."
        ),
        nutriments=Nutriments(
            energy_kcal=42,
            carbohydrates=10.6,
            sugars=10.6,
            fiber=0,
            protein=0,
            fat=0,
            saturated_fat=0,
            sodium=0.012,
            salt=0.03,
        ),
        source="local",
    ),
    Product(
        barcode="012000638398",
        name="Pepsi Cola",
        brand="PepsiCo",
        category="beverages",
        ingredients=(
            "Carbonated water, high fructose corn syrup, caramel color, sugar, "
            "phosphoric acid, caffeine, citric acid, natural flavor."
        ),
        nutriments=Nutriments(
            energy_kcal=41,
            carbohydrates=11.3,
            sugars=11.3,
            protein=0,
            fat=0,
            sodium=0.008,
            salt=0.02,
        ),
        source="local",
    ),
    Product(
        barcode="028400064316",
        name="Lay's Classic Potato Chips",
        brand="Frito-Lay",
        category="snacks",
        ingredients="Potatoes, vegetable oil (sunflower, corn, and/or canola oil), salt.",
        nutriments=Nutriments(
            energy_kcal=536,
            carbohydrates=50,
            sugars=0.9,
            fiber=4.5,
            protein=7.1,
            fat=35.7,
            saturated_fat=12.5,
            sodium=0.536,
            salt=1.34,
        ),
        source="local",
    ),
    Product(
        barcode="044000032319",
        name="Oreo Original Cookies",
        brand="Nabisco",
        category="snacks",
        ingredients=(
            "Sugar, unbleached enriched flour, palm and/or canola oil, cocoa, "
            "high fructose corn syrup, leavening, cornstarch, salt, soy lecithin, "
            "vanillin, chocolate."
        ),
        nutriments=Nutriments(
            energy_kcal=480,
            carbohydrates=70,
            sugars=33,
            fiber=3.3,
            protein=6.7,
            fat=20,
            saturated_fat=6.7,
            sodium=0.4,
            salt=1.0,
        ),
        allergens=frozenset({"gluten", "soybeans"}),
        source="local",
    ),
    Product(
        barcode="025000056789",
        name="Kind Dark Chocolate Nuts & Sea Salt Bar",
        brand="Kind",
        category="snacks",
        ingredients=(
            "Almonds, peanuts, dark chocolate, honey, glucose syrup, rice flour, "
            "sea salt, soy lecithin, vanilla extract."
        ),
        nutriments=Nutriments(
            energy_kcal=500,
            carbohydrates=35,
            sugars=15,
            fiber=7,
            protein=15,
            fat=35,
            saturated_fat=8,
            sodium=0.125,
            salt=0.31,
        ),
        allergens=frozenset({"nuts", "peanuts", "soybeans"}),
        source="local",
    ),
    Product(
        barcode="041303054321",
        name="Greek Yogurt Plain",
        brand="Chobani",
        category="dairies",
        ingredients="Cultured pasteurized nonfat milk, live and active cultures.",
        nutriments=Nutriments(
            energy_kcal=59,
            carbohydrates=3.6,
            sugars=3.6,
            fiber=0,
            protein=10,
            fat=0.4,
            saturated_fat=0.3,
            sodium=0.036,
            salt=0.09,
        ),
        allergens=frozenset({"milk"}),
        source="local",
    ),
    Product(
        barcode="016000275447",
        name="Cheerios Original",
        brand="General Mills",
        category="breakfast-cereals",
        ingredients=(
            "Whole grain oats, corn starch, sugar, salt, tripotassium phosphate, "
            "vitamin E."
        ),
        nutriments=Nutriments(
            energy_kcal=367,
            carbohydrates=73.3,
            sugars=3.3,
            fiber=10,
            protein=13.3,
            fat=6.7,
            saturated_fat=1.7,
            sodium=0.5,
            salt=1.25,
        ),
        source="local",
    ),
    Product(
        barcode="038000845321",
        name="Frosted Flakes",
        brand="Kellogg's",
        category="breakfast-cereals",
        ingredients=(
            "Milled corn, sugar, malt flavor, contains 2% or less of salt, "
            "BHT for freshness."
        ),
        nutriments=Nutriments(
            energy_kcal=375,
            carbohydrates=91.7,
            sugars=33.3,
            fiber=0.8,
            protein=4.2,
            fat=0.8,
            saturated_fat=0.4,
            sodium=0.458,
            salt=1.15,
        ),
        source="local",
    ),
    Product(
        barcode="3017620422003",
        name="Nutella Hazelnut Spread",
        brand="Ferrero",
        category="spreads",
        ingredients=(
            "Sugar, palm oil, hazelnuts (13%), skimmed milk powder (8.7%), "
            "fat-reduced cocoa (7.4%), emulsifier: lecithins (soya), vanillin."
        ),
        nutriments=Nutriments(
            energy_kcal=539,
            carbohydrates=57.5,
            sugars=56.3,
            fiber=0,
            protein=6.3,
            fat=30.9,
            saturated_fat=10.6,
            sodium=0.041,
            salt=0.107,
        ),
        allergens=frozenset({"milk", "nuts", "soybeans"}),
        additives=frozenset({"e322"}),
        source="local",
    ),
)
