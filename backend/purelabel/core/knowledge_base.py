"""
PureLabel AI - Ingredient Knowledge Base

Static table mapping a lowercase match key to plain-language health
metadata, plus the ordered product keyword table.

Both tables are read-only and shared by every request. Declaration order
is significant: it decides which entries survive deduplication and
truncation, and which product keyword wins.
"""

from types import MappingProxyType
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from purelabel.core.state import ImpactClass, TradeOff


class KnowledgeEntry(BaseModel):
    """Health metadata for one ingredient phrase."""
    model_config = ConfigDict(frozen=True)

    simple_name: str = Field(..., description="Human label")
    purpose: str = Field(..., description="Functional role")
    impact: ImpactClass
    explanation: str
    tradeoff: Optional[TradeOff] = None


def _entry(simple_name, purpose, impact, explanation, tradeoff=None) -> KnowledgeEntry:
    return KnowledgeEntry(
        simple_name=simple_name,
        purpose=purpose,
        impact=ImpactClass(impact),
        explanation=explanation,
        tradeoff=tradeoff,
    )


KNOWLEDGE_BASE: MappingProxyType = MappingProxyType({
    # Instant noodles
    "wheat flour": _entry("Refined Wheat", "Base", "neutral",
                          "Standard refined flour, low in fiber."),
    "palm oil": _entry("Palm Oil", "Cooking Fat", "caution",
                       "High in saturated fats; environmental concerns.",
                       TradeOff(benefit="Shelf stability", cost="High saturated fat load")),
    "wheat gluten": _entry("Wheat Protein", "Texture", "neutral",
                           "Natural protein from wheat that gives chewiness."),
    "potassium chloride": _entry("Salt Substitute", "Mineral", "neutral",
                                 "Often used to reduce sodium content."),
    "guar gum": _entry("Guar Fiber", "Thickener", "positive",
                       "Natural fiber from guar beans used to bind."),
    "sodium tripolyphosphate": _entry("STPP (Stabilizer)", "Texture", "caution",
                                      "Helps retain moisture and improve noodle texture."),
    "potassium carbonate": _entry("Alkaline Salt", "Acidity Regulator", "neutral",
                                  "Used to give noodles their yellow color and springy texture."),
    "caramel color": _entry("Caramel Dye", "Coloring", "caution",
                            "A common food dye; some classes are strictly regulated."),

    # Juices and beverages
    "mixed fruit juice concentrate": _entry("Fruit Sugars", "Flavor/Base", "neutral",
                                            "Fruit juice with water removed; natural but high in sugar."),
    "ins 330": _entry("Citric Acid", "Tang/Preservative", "neutral",
                      "Naturally occurring acid providing tartness."),
    "citric acid": _entry("Citric Acid", "Tang/Preservative", "neutral",
                          "Standard acidity regulator."),
    "ins 300": _entry("Vitamin C", "Antioxidant", "positive",
                      "Essential nutrient used here to prevent oxidation."),
    "ascorbic acid": _entry("Vitamin C", "Antioxidant", "positive",
                            "Pure Vitamin C."),
    "sugar": _entry("Refined Sugar", "Sweetener", "caution",
                    "Adds calories without nutrition; spikes blood sugar."),

    # Colas
    "carbonated water": _entry("Fizzy Water", "Base", "neutral",
                               "Water infused with carbon dioxide."),
    "phosphoric acid": _entry("Acidulant", "Sharp Flavor", "caution",
                              "Provides the signature 'bite'; can affect bone minerals in excess."),
    "caffeine": _entry("Caffeine", "Stimulant", "neutral",
                       "Natural stimulant; provides energy boost but can cause jitters."),
    "natural flavors": _entry("Aroma Compounds", "Flavor", "neutral",
                              "Proprietary flavor extracts from natural sources."),

    # Extruded snacks
    "rice meal": _entry("Rice Flour", "Base", "positive",
                        "A gluten-free carbohydrate source."),
    "corn meal": _entry("Corn Flour", "Base", "neutral",
                        "Standard grain-based snack base."),
    "gram meal": _entry("Chickpea Flour", "Protein/Texture", "positive",
                        "High-protein flour made from ground chickpeas."),
    "palmolein oil": _entry("Liquid Palm Fat", "Frying Oil", "caution",
                            "The liquid fraction of palm oil."),
    "onion powder": _entry("Dried Onion", "Flavoring", "positive",
                           "Natural vegetable extract."),
    "chilli powder": _entry("Spices", "Heat/Flavor", "positive",
                            "Natural spice providing antioxidants."),
    "amchur": _entry("Mango Powder", "Tangy Spice", "positive",
                     "Dried green mango powder; a natural flavoring."),
    "ginger powder": _entry("Dried Ginger", "Flavoring", "positive",
                            "Natural root extract with anti-inflammatory properties."),
    "salt": _entry("Table Salt", "Seasoning", "neutral",
                   "Essential mineral, but best consumed in moderation."),

    # Common additives
    "sucralose": _entry("Splenda", "Sweetener", "caution",
                        "Zero-calorie, but affects gut health."),
    "carrageenan": _entry("Seaweed Thickener", "Texture", "caution",
                          "May cause digestive inflammation."),
    "sodium benzoate": _entry("Preservative", "Shelf-life", "caution",
                              "Common preservative."),
    "red 40": _entry("Synthetic Red Dye", "Coloring", "negative",
                     "Purely aesthetic, linked to hyperactivity."),
})

# Checked in this order; a later match overwrites an earlier one.
PRODUCT_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("maggi", "Maggi Noodles"),
    ("real", "Real Fruit Juice"),
    ("cola", "Coca Cola"),
    ("kurkure", "Kurkure Snacks"),
)

DEFAULT_PRODUCT_NAME = "Local Scan"
