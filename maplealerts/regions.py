from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional, Tuple


# Province/territory -> responsible Storm Prediction Centre.
PROVINCE_OFFICES: Mapping[str, str] = MappingProxyType(
    {
        "bc": "CWVR",  # Pacific and Yukon
        "ab": "CWWG",  # Prairie and Arctic (CWEG redirects here)
        "sk": "CWWG",
        "mb": "CWWG",
        "on": "CWTO",  # Ontario
        "qc": "CWUL",  # Quebec
        "nb": "CWHX",  # Atlantic
        "ns": "CWHX",
        "pe": "CWHX",
        "nl": "CWHX",
        "yt": "CWVR",
        "nt": "CWWG",
        "nu": "CWWG",
    }
)

PROVINCE_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "ab": "Alberta",
        "bc": "British Columbia",
        "mb": "Manitoba",
        "nb": "New Brunswick",
        "nl": "Newfoundland and Labrador",
        "nt": "Northwest Territories",
        "ns": "Nova Scotia",
        "nu": "Nunavut",
        "on": "Ontario",
        "pe": "Prince Edward Island",
        "qc": "Quebec",
        "sk": "Saskatchewan",
        "yt": "Yukon",
    }
)


def office_for_province(code: str | None) -> Optional[str]:
    if not code:
        return None
    return PROVINCE_OFFICES.get(str(code).strip().lower())


def province_code(name_or_code: str | None) -> Optional[str]:
    """
    Resolve a province name ("Nova Scotia"), a fragment of one, or a
    two-letter code ("NS") to the lowercase two-letter code.
    """
    if not name_or_code:
        return None
    s = str(name_or_code).strip().lower()
    if not s:
        return None

    if s in PROVINCE_NAMES:
        return s

    for code, name in PROVINCE_NAMES.items():
        if name.lower() == s:
            return code

    for code, name in PROVINCE_NAMES.items():
        n = name.lower()
        if n in s or s in n:
            return code

    abbr = s[:2]
    if abbr in PROVINCE_NAMES:
        return abbr
    return None


# EC forecast region name -> keywords that show up in reverse-geocoded place
# names for that region. "coastal" and "inland" are special: they are only
# consulted when an area description says "coastal" or "inland" (BC North Coast).
REGION_KEYWORDS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        # British Columbia
        "coastal": ("prince rupert", "port edward", "oona", "porcher", "digby", "masset", "haida",
                    "queen charlotte", "sandspit", "skidegate", "tlell", "south skeena"),
        "inland": ("terrace", "kitimat", "stewart", "nass", "lakelse", "thornhill"),
        "central coast": ("bella coola", "ocean falls", "bella bella", "klemtu", "shearwater", "hagensborg"),
        "north vancouver island": ("port hardy", "port mcneill", "port alice", "alert bay", "sointula",
                                   "coal harbour"),
        "east vancouver island": ("nanaimo", "parksville", "qualicum", "ladysmith", "chemainus", "duncan",
                                  "lake cowichan", "mill bay"),
        "west vancouver island": ("tofino", "ucluelet", "port alberni", "bamfield", "pacific rim", "clayoquot"),
        "south vancouver island": ("victoria", "sooke", "sidney", "saanich", "metchosin", "langford", "colwood",
                                   "oak bay", "esquimalt"),
        "inland vancouver island": ("courtenay", "comox", "campbell river", "gold river", "sayward", "cumberland"),
        "sunshine coast": ("gibsons", "sechelt", "powell river", "texada", "pender harbour", "halfmoon bay"),
        "north thompson": ("clearwater", "valemount", "blue river", "wells gray", "barriere", "little fort"),
        "south thompson": ("kamloops", "chase", "salmon arm", "sicamous", "sorrento", "blind bay"),
        "north columbia": ("revelstoke", "mica creek", "glacier", "rogers pass"),
        "west columbia": ("golden", "field", "yoho"),
        "east columbia": ("invermere", "radium", "fairmont", "canal flats", "kimberley", "cranbrook", "windermere"),
        "north okanagan": ("vernon", "armstrong", "enderby", "lumby", "coldstream", "spallumcheen"),
        "central okanagan": ("kelowna", "west kelowna", "peachland", "lake country", "winfield"),
        "south okanagan": ("penticton", "summerland", "oliver", "osoyoos", "keremeos", "naramata"),
        "similkameen": ("princeton", "hedley", "manning park", "tulameen"),
        "boundary": ("grand forks", "greenwood", "rock creek", "midway", "christina lake"),
        "west kootenay": ("nelson", "castlegar", "trail", "rossland", "salmo", "slocan", "new denver", "kaslo"),
        "east kootenay": ("fernie", "sparwood", "elkford", "creston", "cranbrook", "jaffray"),
        "metro vancouver": ("vancouver", "burnaby", "richmond", "surrey", "coquitlam", "port coquitlam",
                            "port moody", "new westminster", "delta", "langley", "white rock", "north vancouver",
                            "west vancouver", "maple ridge", "pitt meadows"),
        "fraser valley": ("abbotsford", "chilliwack", "mission", "hope", "agassiz", "harrison", "kent", "yarrow"),
        "howe sound": ("squamish", "whistler", "pemberton", "britannia", "lions bay", "brackendale"),
        "prince george": ("prince george", "mackenzie", "mcbride", "bear lake"),
        "bulkley valley": ("smithers", "houston", "burns lake", "telkwa", "bulkley", "topley"),
        "nechako": ("vanderhoof", "fort fraser", "fraser lake", "fort st james"),
        "cariboo": ("williams lake", "quesnel", "100 mile", "150 mile", "lac la hache", "horsefly"),
        "chilcotin": ("alexis creek", "anahim lake", "tatla lake", "nimpo lake", "kleena kleene"),
        "peace river": ("fort st john", "dawson creek", "chetwynd", "hudson hope", "fort nelson", "tumbler ridge",
                        "taylor", "pouce coupe"),
        # Ontario
        "city of toronto": ("toronto", "scarborough", "etobicoke", "north york", "york"),
        "york - durham": ("markham", "vaughan", "richmond hill", "aurora", "newmarket", "oshawa", "whitby", "ajax",
                          "pickering", "uxbridge", "stouffville"),
        "peel - halton": ("mississauga", "brampton", "oakville", "burlington", "milton", "halton hills",
                          "georgetown", "caledon"),
        "hamilton - niagara": ("hamilton", "st. catharines", "niagara falls", "welland", "grimsby", "stoney creek",
                               "dundas", "ancaster", "fort erie", "port colborne"),
        "waterloo - wellington": ("kitchener", "waterloo", "cambridge", "guelph", "fergus", "elora", "elmira"),
        "london - middlesex": ("london", "strathroy", "st. thomas", "aylmer"),
        "windsor - essex": ("windsor", "leamington", "amherstburg", "tecumseh", "lakeshore", "essex", "kingsville"),
        "chatham-kent - lambton": ("chatham", "sarnia", "wallaceburg", "petrolia", "point edward"),
        "huron - perth": ("stratford", "goderich", "st. marys", "clinton", "seaforth", "exeter", "listowel"),
        "grey - bruce": ("owen sound", "hanover", "walkerton", "port elgin", "southampton", "kincardine", "meaford",
                         "thornbury", "wiarton", "tobermory"),
        "simcoe - muskoka": ("barrie", "orillia", "collingwood", "midland", "penetanguishene", "wasaga beach",
                             "gravenhurst", "bracebridge", "huntsville", "innisfil", "alliston", "angus", "muskoka"),
        "kawartha - haliburton": ("peterborough", "lindsay", "cobourg", "port hope", "haliburton", "minden",
                                  "bancroft", "bobcaygeon", "fenelon falls"),
        "quinte - kingston": ("belleville", "kingston", "trenton", "napanee", "picton", "prince edward county",
                              "gananoque", "brockville"),
        "ottawa - gatineau": ("ottawa", "kanata", "orleans", "nepean", "gloucester", "vanier", "gatineau"),
        "prescott - russell": ("hawkesbury", "rockland", "casselman", "embrun"),
        "stormont - dundas": ("cornwall", "morrisburg", "winchester", "chesterville"),
        "renfrew - pembroke": ("pembroke", "petawawa", "arnprior", "renfrew", "deep river", "chalk river",
                               "barry's bay"),
        "parry sound - nipissing": ("north bay", "parry sound", "mattawa", "sturgeon falls", "powassan",
                                    "sundridge", "burk's falls"),
        "sudbury": ("sudbury", "greater sudbury", "espanola", "manitoulin", "capreol", "valley east"),
        "algoma - sault ste. marie": ("sault ste. marie", "elliot lake", "blind river", "wawa", "white river",
                                      "hornepayne"),
        "thunder bay": ("thunder bay", "nipigon", "marathon", "terrace bay", "schreiber"),
        "kenora - rainy river": ("kenora", "fort frances", "dryden", "sioux lookout", "red lake", "ear falls"),
        "timmins - cochrane": ("timmins", "cochrane", "kapuskasing", "hearst", "smooth rock falls",
                               "iroquois falls"),
        "kirkland lake - temiskaming": ("kirkland lake", "new liskeard", "temiskaming shores", "englehart",
                                        "cobalt", "haileybury"),
        "sandy lake": ("sandy lake", "weagamow", "deer lake", "north caribou", "keewaywin"),
        "pikangikum": ("pikangikum", "poplar hill", "macdowell", "north spirit lake"),
        "pickle lake": ("pickle lake", "cat lake", "mishkeegogamang", "osnaburgh"),
        "moosonee": ("moosonee", "moose factory", "attawapiskat", "kashechewan", "fort albany"),
        "big trout lake": ("big trout lake", "kitchenuhmaykoosib", "kii", "sachigo lake", "bearskin lake",
                           "kasabonika"),
        "peawanuck": ("peawanuck", "fort severn", "weenusk"),
        # Alberta
        "edmonton metro": ("edmonton", "st. albert", "sherwood park", "spruce grove", "stony plain", "leduc",
                           "beaumont", "fort saskatchewan"),
        "calgary metro": ("calgary", "airdrie", "cochrane", "okotoks", "chestermere", "strathmore", "high river"),
        "red deer": ("red deer", "innisfail", "sylvan lake", "lacombe", "ponoka", "blackfalds"),
        "lethbridge": ("lethbridge", "coaldale", "taber", "picture butte", "cardston", "pincher creek",
                       "fort macleod"),
        "medicine hat": ("medicine hat", "brooks", "redcliff", "bow island"),
        "grande prairie": ("grande prairie", "beaverlodge", "sexsmith", "wembley", "clairmont"),
        "fort mcmurray": ("fort mcmurray", "wood buffalo", "anzac", "fort chipewyan"),
        "banff - jasper": ("banff", "jasper", "canmore", "lake louise", "kananaskis"),
        "lloydminster": ("lloydminster", "vermilion", "wainwright", "provost"),
        "wetaskiwin - camrose": ("wetaskiwin", "camrose", "drayton valley", "devon"),
        "peace river alberta": ("peace river", "high level", "fairview", "grimshaw", "manning"),
        # Saskatchewan
        "saskatoon": ("saskatoon", "warman", "martensville", "osler", "dalmeny", "langham"),
        "regina": ("regina", "moose jaw", "lumsden", "white city", "pilot butte", "balgonie"),
        "prince albert": ("prince albert", "la ronge", "nipawin", "melfort"),
        "swift current": ("swift current", "maple creek", "shaunavon"),
        "yorkton": ("yorkton", "melville", "canora", "esterhazy"),
        "north battleford": ("north battleford", "battleford", "unity", "lloydminster"),
        "estevan": ("estevan", "weyburn", "carlyle", "oxbow"),
        # Manitoba
        "winnipeg": ("winnipeg", "steinbach", "selkirk", "stonewall", "beausejour", "headingley"),
        "brandon": ("brandon", "portage la prairie", "carberry", "souris", "virden"),
        "thompson": ("thompson", "flin flon", "the pas", "snow lake"),
        "dauphin": ("dauphin", "swan river", "roblin", "grandview"),
        "morden - winkler": ("morden", "winkler", "altona", "carman", "morris"),
        # Quebec
        "montreal": ("montreal", "laval", "longueuil", "brossard", "terrebonne", "repentigny",
                     "st-jean-sur-richelieu", "blainville"),
        "quebec city": ("quebec", "lévis", "beauport", "charlesbourg", "ste-foy", "cap-rouge"),
        "gatineau": ("gatineau", "hull", "aylmer"),
        "sherbrooke": ("sherbrooke", "magog", "granby", "drummondville"),
        "trois-rivières": ("trois-rivières", "shawinigan", "victoriaville"),
        "saguenay": ("saguenay", "chicoutimi", "jonquière", "alma", "roberval"),
        "rimouski": ("rimouski", "rivière-du-loup", "matane", "mont-joli"),
        "sept-îles": ("sept-îles", "baie-comeau", "port-cartier", "havre-saint-pierre"),
        "val-d'or": ("val-d'or", "rouyn-noranda", "amos", "la sarre"),
        "gaspé": ("gaspé", "percé", "chandler", "new richmond", "carleton"),
        # New Brunswick
        "saint john": ("saint john", "quispamsis", "rothesay", "grand bay-westfield"),
        "moncton": ("moncton", "dieppe", "riverview", "shediac"),
        "fredericton": ("fredericton", "oromocto", "new maryland"),
        "bathurst - miramichi": ("bathurst", "miramichi", "campbellton", "dalhousie", "caraquet"),
        "edmundston": ("edmundston", "grand falls", "woodstock", "hartland"),
        # Nova Scotia
        "halifax": ("halifax", "dartmouth", "bedford", "sackville", "cole harbour"),
        "cape breton": ("sydney", "glace bay", "new waterford", "north sydney", "port hawkesbury"),
        "truro - amherst": ("truro", "amherst", "new glasgow", "stellarton", "pictou"),
        "yarmouth - digby": ("yarmouth", "digby", "shelburne", "barrington"),
        "annapolis valley": ("kentville", "wolfville", "berwick", "middleton", "bridgetown", "annapolis royal"),
        # Prince Edward Island
        "charlottetown": ("charlottetown", "stratford", "cornwall"),
        "summerside": ("summerside", "kensington", "alberton", "tignish"),
        # Newfoundland and Labrador
        "st. john's": ("st. john's", "mount pearl", "conception bay south", "paradise", "torbay"),
        "corner brook": ("corner brook", "stephenville", "port aux basques", "deer lake"),
        "gander - grand falls": ("gander", "grand falls-windsor", "lewisporte", "twillingate"),
        "labrador": ("happy valley-goose bay", "labrador city", "wabush", "churchill falls"),
    }
)

QUALIFIER_REGIONS = ("coastal", "inland")
