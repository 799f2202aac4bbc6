"""Fixed catalog of canonical ingredients and their known spellings."""

from collections.abc import Iterable, Iterator
from functools import lru_cache
from types import MappingProxyType

from menuplanner.logging_config import get_logger
from menuplanner.models import CanonicalCatalogEntry
from menuplanner.models import IngredientCategory as Cat
from menuplanner.normalize.text import normalize_name

logger = get_logger(__name__)


def _entry(canonical: str, display: str, category: Cat, *aliases: str) -> CanonicalCatalogEntry:
    return CanonicalCatalogEntry(
        canonical_name=canonical,
        display_name=display,
        category=category,
        aliases=aliases,
    )


# Aliases are raw spellings; they go through the same name normalization as
# incoming ingredient lines when the lookup table is built.
CATALOG_ENTRIES: tuple[CanonicalCatalogEntry, ...] = (
    # Produce
    _entry("vitlok", "Vitlök", Cat.PRODUCE, "vitlöksklyfta", "vitlöksklyftor", "garlic"),
    _entry("gul lok", "Gul lök", Cat.PRODUCE, "lök", "lökar", "gula lökar", "gullök", "onion"),
    _entry("rodlok", "Rödlök", Cat.PRODUCE, "röd lök", "rödlökar", "röda lökar"),
    _entry("tomat", "Tomat", Cat.PRODUCE, "tomater", "kvisttomater"),
    _entry("morot", "Morot", Cat.PRODUCE, "morötter"),
    _entry("potatis", "Potatis", Cat.PRODUCE, "potatisar", "fast potatis", "mjölig potatis"),
    _entry("paprika", "Paprika", Cat.PRODUCE, "paprikor", "röd paprika", "gul paprika"),
    _entry("spenat", "Spenat", Cat.PRODUCE, "babyspenat", "bladspenat"),
    _entry("broccoli", "Broccoli", Cat.PRODUCE, "broccolibuketter"),
    _entry("gurka", "Gurka", Cat.PRODUCE, "gurkor", "slanggurka"),
    _entry("zucchini", "Zucchini", Cat.PRODUCE, "squash"),
    _entry("citron", "Citron", Cat.PRODUCE, "citroner"),
    _entry("lime", "Lime", Cat.PRODUCE, "limefrukt", "limefrukter"),
    _entry("dill", "Dill", Cat.PRODUCE),
    _entry("persilja", "Persilja", Cat.PRODUCE, "bladpersilja", "slätbladig persilja"),
    _entry("basilika", "Basilika", Cat.PRODUCE),
    _entry("koriander", "Koriander", Cat.PRODUCE),
    _entry("avokado", "Avokado", Cat.PRODUCE, "avokador", "avocado"),
    _entry("ingefara", "Ingefära", Cat.PRODUCE, "ingefärsrot"),
    _entry("champinjoner", "Champinjoner", Cat.PRODUCE, "champinjon"),
    _entry("svamp", "Svamp", Cat.PRODUCE, "skogssvamp", "blandad svamp"),
    # Dairy
    _entry("smor", "Smör", Cat.DAIRY),
    _entry("mjolk", "Mjölk", Cat.DAIRY, "standardmjölk", "mellanmjölk"),
    _entry("gradde", "Grädde", Cat.DAIRY, "vispgrädde", "matlagningsgrädde"),
    _entry("creme fraiche", "Crème fraiche", Cat.DAIRY, "crème fraîche"),
    _entry("ost", "Ost", Cat.DAIRY, "hushållsost", "lagrad ost"),
    _entry("parmesan", "Parmesan", Cat.DAIRY, "parmesanost", "parmigiano reggiano"),
    _entry("mozzarella", "Mozzarella", Cat.DAIRY, "mozzarellaost"),
    _entry("yoghurt", "Yoghurt", Cat.DAIRY, "turkisk yoghurt", "grekisk yoghurt", "naturell yoghurt"),
    _entry("agg", "Ägg", Cat.DAIRY, "eggs"),
    # Pantry
    _entry("pasta", "Pasta", Cat.PANTRY, "penne", "fusilli", "makaroner"),
    _entry("spaghetti", "Spaghetti", Cat.PANTRY, "spagetti"),
    _entry("gnocchi", "Gnocchi", Cat.PANTRY),
    _entry("ris", "Ris", Cat.PANTRY, "jasminris", "basmatiris", "långkornigt ris"),
    _entry("bulgur", "Bulgur", Cat.PANTRY),
    _entry("linser", "Linser", Cat.PANTRY, "röda linser", "gröna linser"),
    _entry("bonor", "Bönor", Cat.PANTRY, "kidneybönor", "vita bönor", "svarta bönor"),
    _entry("kikartor", "Kikärtor", Cat.PANTRY, "kikärter"),
    _entry("krossade tomater", "Krossade tomater", Cat.PANTRY, "tomatkross"),
    _entry("soltorkade tomater i olja", "Soltorkade tomater i olja", Cat.PANTRY),
    _entry("tomatpure", "Tomatpuré", Cat.PANTRY),
    _entry("kokosmjolk", "Kokosmjölk", Cat.PANTRY),
    _entry("olivolja", "Olivolja", Cat.PANTRY, "extra virgin olivolja"),
    _entry("rapsolja", "Rapsolja", Cat.PANTRY, "olja", "neutral olja"),
    _entry("vetemjol", "Vetemjöl", Cat.PANTRY, "mjöl"),
    _entry("socker", "Socker", Cat.PANTRY, "strösocker"),
    _entry("honung", "Honung", Cat.PANTRY),
    _entry("soja", "Soja", Cat.PANTRY, "sojasås", "japansk soja", "kinesisk soja"),
    _entry(
        "gronsaksbuljong",
        "Grönsaksbuljong",
        Cat.PANTRY,
        "grönsaksbuljongtärning",
        "grönsaksbuljong tärning",
        "grönsaksfond",
    ),
    _entry("kycklingbuljong", "Kycklingbuljong", Cat.PANTRY, "kycklingfond", "hönsbuljong"),
    _entry("jordnotssmor", "Jordnötssmör", Cat.PANTRY),
    _entry("cashewnotter", "Cashewnötter", Cat.PANTRY, "cashew"),
    _entry("strobrod", "Ströbröd", Cat.PANTRY, "panko"),
    _entry("tortillabrod", "Tortillabröd", Cat.PANTRY, "tortillas", "tortilla"),
    _entry("vatten", "Vatten", Cat.PANTRY, "kallt vatten", "varmt vatten", "kokande vatten"),
    # Meat and fish
    _entry("kycklingfile", "Kycklingfilé", Cat.MEAT_FISH, "kycklingfiléer", "kycklingbröst", "kyckling"),
    _entry("lax", "Lax", Cat.MEAT_FISH, "laxfilé", "laxfiléer"),
    _entry("torsk", "Torsk", Cat.MEAT_FISH, "torskfilé", "torskrygg"),
    _entry("rakor", "Räkor", Cat.MEAT_FISH, "skalade räkor"),
    _entry("notfars", "Nötfärs", Cat.MEAT_FISH, "köttfärs"),
    _entry("flaskfile", "Fläskfilé", Cat.MEAT_FISH),
    _entry("bacon", "Bacon", Cat.MEAT_FISH, "baconskivor"),
    _entry("tofu", "Tofu", Cat.MEAT_FISH, "fast tofu"),
    # Spices
    _entry("salt", "Salt", Cat.SPICES, "flingsalt", "havssalt"),
    _entry("svartpeppar", "Svartpeppar", Cat.SPICES, "peppar"),
    _entry("chili", "Chili", Cat.SPICES, "chilifrukt", "röd chili"),
    _entry("paprikapulver", "Paprikapulver", Cat.SPICES, "rökt paprikapulver"),
    _entry("spiskummin", "Spiskummin", Cat.SPICES, "malen spiskummin"),
    _entry("oregano", "Oregano", Cat.SPICES, "torkad oregano"),
    _entry("kanel", "Kanel", Cat.SPICES, "malen kanel"),
    _entry("curry", "Curry", Cat.SPICES, "currypulver"),
    _entry("timjan", "Timjan", Cat.SPICES, "torkad timjan"),
)

WATER_CANONICAL_NAME = "vatten"


class CanonicalCatalog:
    """
    Immutable lookup structure over the canonical ingredients.

    Holds a direct alias -> entry map for exact lookups and the ordered
    (alias, entry) pairs scanned by fuzzy matching.
    """

    def __init__(self, entries: Iterable[CanonicalCatalogEntry]):
        self._entries = tuple(entries)
        by_alias: dict[str, CanonicalCatalogEntry] = {}
        by_name: dict[str, CanonicalCatalogEntry] = {}

        for entry in self._entries:
            if entry.canonical_name in by_name:
                raise ValueError(f"Duplicate canonical ingredient '{entry.canonical_name}'")
            by_name[entry.canonical_name] = entry

            for alias in (entry.canonical_name, entry.display_name, *entry.aliases):
                key = normalize_name(alias)
                if not key:
                    raise ValueError(f"Alias '{alias}' of '{entry.canonical_name}' normalizes to nothing")
                existing = by_alias.get(key)
                if existing is not None and existing is not entry:
                    raise ValueError(
                        f"Alias '{alias}' maps to both '{existing.canonical_name}' "
                        f"and '{entry.canonical_name}'"
                    )
                by_alias[key] = entry

        self._by_alias = MappingProxyType(by_alias)
        self._by_name = MappingProxyType(by_name)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CanonicalCatalogEntry]:
        return iter(self._entries)

    def __contains__(self, canonical_name: object) -> bool:
        return canonical_name in self._by_name

    @property
    def entries(self) -> tuple[CanonicalCatalogEntry, ...]:
        return self._entries

    def lookup(self, normalized_name: str) -> CanonicalCatalogEntry | None:
        """Exact lookup of an already normalized name."""
        return self._by_alias.get(normalized_name)

    def get(self, canonical_name: str) -> CanonicalCatalogEntry | None:
        return self._by_name.get(canonical_name)

    def alias_pairs(self) -> Iterator[tuple[str, CanonicalCatalogEntry]]:
        """Yield (normalized alias, entry) pairs in catalog order."""
        return iter(self._by_alias.items())


@lru_cache
def get_catalog() -> CanonicalCatalog:
    """Get the process-wide catalog, built on first use."""
    catalog = CanonicalCatalog(CATALOG_ENTRIES)
    logger.info(f"Loaded ingredient catalog: {len(catalog)} entries")
    return catalog
