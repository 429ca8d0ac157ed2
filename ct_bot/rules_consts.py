"""
rules_consts.py — Canonical Labels for the Colonial Twilight FLN Bot

Every string label for factions, pieces, markers, spaces, support levels,
actions, cards, capabilities and momentum used anywhere in the codebase
MUST come from this file.

If a label doesn't exist here, it is wrong.

Organization: constants grouped by category, each traced to the section
of the Colonial Twilight rules or the FLN Bot flowchart it comes from.
"""

# ============================================================================
# FACTIONS (§1.5)
# ============================================================================

GOV = "Government"      # French Government (blue) — §1.5
FLN = "FLN"             # Front de Libération Nationale (green) — §1.5

FACTIONS = (GOV, FLN)


# ============================================================================
# PIECE TYPES (§1.4)
# ============================================================================

FRENCH_TROOPS = "French Troops"
FRENCH_POLICE = "French Police"
ALGERIAN_TROOPS = "Algerian Troops"
ALGERIAN_POLICE = "Algerian Police"
HIDDEN_GUERRILLAS = "Underground Guerrillas"   # §1.4.3
ACTIVE_GUERRILLAS = "Active Guerrillas"        # §1.4.3
GOV_BASES = "Government Bases"
FLN_BASES = "FLN Bases"

PIECE_TYPES = (
    FRENCH_TROOPS, FRENCH_POLICE, ALGERIAN_TROOPS, ALGERIAN_POLICE,
    HIDDEN_GUERRILLAS, ACTIVE_GUERRILLAS, GOV_BASES, FLN_BASES,
)

# Piece groupings — §1.4
FRENCH_CUBES = (FRENCH_TROOPS, FRENCH_POLICE)
ALGERIAN_CUBES = (ALGERIAN_TROOPS, ALGERIAN_POLICE)
CUBES = FRENCH_CUBES + ALGERIAN_CUBES
TROOPS = (FRENCH_TROOPS, ALGERIAN_TROOPS)
POLICE = (FRENCH_POLICE, ALGERIAN_POLICE)
GUERRILLAS = (HIDDEN_GUERRILLAS, ACTIVE_GUERRILLAS)
GOV_PIECES = CUBES + (GOV_BASES,)
FLN_PIECES = GUERRILLAS + (FLN_BASES,)
BASES = (GOV_BASES, FLN_BASES)

# Attack losses are taken in this order — §3.3.3
ATTACK_LOSS_ORDER = (
    FRENCH_POLICE, ALGERIAN_POLICE, FRENCH_TROOPS, ALGERIAN_TROOPS,
    GOV_BASES,
)

# Piece manifests — §1.4.1
PIECE_MANIFEST = {
    FRENCH_TROOPS: 9,
    FRENCH_POLICE: 21,
    ALGERIAN_TROOPS: 3,
    ALGERIAN_POLICE: 7,
    HIDDEN_GUERRILLAS: 30,     # Guerrillas are always Available underground
    ACTIVE_GUERRILLAS: 0,
    GOV_BASES: 6,
    FLN_BASES: 15,
}
GUERRILLAS_MANIFEST = 30


# ============================================================================
# MARKERS (§1.6, §1.9)
# ============================================================================

MARKER_RESETTLED = "Resettled"           # §4.2.2
MARKER_PLUS1_POP = "+1 Pop"              # Card 43 unshaded
MARKER_PLUS1_BASE = "+1 Base"            # Card 43 shaded

TERROR_MARKER_MANIFEST = 12
MARKER_MANIFEST = {
    MARKER_RESETTLED: 7,
    MARKER_PLUS1_POP: 2,
    MARKER_PLUS1_BASE: 2,
}


# ============================================================================
# SUPPORT AND CONTROL (§1.6, §1.7)
# ============================================================================

SUPPORT = "Support"
NEUTRAL = "Neutral"
OPPOSE = "Oppose"

SUPPORT_LEVELS = (OPPOSE, NEUTRAL, SUPPORT)

GOV_CONTROL = "Government Control"
FLN_CONTROL = "FLN Control"
UNCONTROLLED = "Uncontrolled"


# ============================================================================
# SPACE TYPES AND TERRAIN (§1.3)
# ============================================================================

CITY = "City"
SECTOR = "Sector"
COUNTRY = "Country"

MOUNTAINS = "Mountains"
PLAINS = "Plains"
URBAN = "Urban"


# ============================================================================
# SPACES (§1.3, map)
# ============================================================================

# Wilaya I
BARIKA = "Barika"
BATNA = "Batna"
BISKRA = "Biskra"
OUM_EL_BOUAGHI = "Oum El Bouaghi"
TEBESSA = "Tebessa"
NEGRINE = "Negrine"
# Wilaya II
CONSTANTINE = "Constantine"
SETIF = "Setif"
PHILIPPEVILLE = "Philippeville"
SOUK_AHRAS = "Souk Ahras"
# Wilaya III
TIZI_OUZOU = "Tizi Ouzou"
BORDJ_BOU_ARRERIDJ = "Bordj Bou Arreridj"
BOUGIE = "Bougie"
# Wilaya IV
ALGIERS = "Algiers"
MEDEA = "Medea"
ORLEANSVILLE = "OrleansVille"
# Wilaya V
ORAN = "Oran"
MECHERIA = "Mecheria"
TLEMCEN = "Tlemcen"
SIDI_BEL_ABBES = "Sidi Bel Abbes"
MOSTAGANEM = "Mostaganem"
SAIDA = "Saida"
MASCARA = "Mascara"
TIARET = "Tiaret"
AIN_SEFRA = "Ain Sefra"
LAGHOUAT = "Laghouat"
# Wilaya VI
SIDI_AISSA = "Sidi Aissa"
AIN_OUSSERA = "Ain Oussera"
# Countries
MOROCCO = "Morocco"
TUNISIA = "Tunisia"

# (name, space type, zone, terrain, base population, coastal)
SPACE_DEFINITIONS = (
    (BARIKA, SECTOR, "I-1", MOUNTAINS, 1, False),
    (BATNA, SECTOR, "I-2", MOUNTAINS, 0, False),
    (BISKRA, SECTOR, "I-3", PLAINS, 0, False),
    (OUM_EL_BOUAGHI, SECTOR, "I-4", MOUNTAINS, 0, False),
    (TEBESSA, SECTOR, "I-5", MOUNTAINS, 1, False),
    (NEGRINE, SECTOR, "I-6", MOUNTAINS, 0, False),
    (CONSTANTINE, CITY, "II", URBAN, 2, False),
    (SETIF, SECTOR, "II-1", MOUNTAINS, 1, True),
    (PHILIPPEVILLE, SECTOR, "II-2", MOUNTAINS, 2, True),
    (SOUK_AHRAS, SECTOR, "II-3", PLAINS, 2, True),
    (TIZI_OUZOU, SECTOR, "III-1", MOUNTAINS, 2, True),
    (BORDJ_BOU_ARRERIDJ, SECTOR, "III-2", MOUNTAINS, 1, False),
    (BOUGIE, SECTOR, "III-3", MOUNTAINS, 2, True),
    (ALGIERS, CITY, "IV", URBAN, 3, True),
    (MEDEA, SECTOR, "IV-1", MOUNTAINS, 2, True),
    (ORLEANSVILLE, SECTOR, "IV-2", MOUNTAINS, 2, True),
    (ORAN, CITY, "V", URBAN, 2, True),
    (MECHERIA, SECTOR, "V-1", MOUNTAINS, 0, False),
    (TLEMCEN, SECTOR, "V-2", PLAINS, 1, True),
    (SIDI_BEL_ABBES, SECTOR, "V-3", PLAINS, 1, True),
    (MOSTAGANEM, SECTOR, "V-4", MOUNTAINS, 2, True),
    (SAIDA, SECTOR, "V-5", MOUNTAINS, 0, False),
    (MASCARA, SECTOR, "V-6", MOUNTAINS, 0, False),
    (TIARET, SECTOR, "V-7", MOUNTAINS, 0, False),
    (AIN_SEFRA, SECTOR, "V-8", PLAINS, 0, False),
    (LAGHOUAT, SECTOR, "V-9", PLAINS, 0, False),
    (SIDI_AISSA, SECTOR, "VI-1", MOUNTAINS, 0, False),
    (AIN_OUSSERA, SECTOR, "VI-2", MOUNTAINS, 1, False),
    (MOROCCO, COUNTRY, "", PLAINS, 1, True),
    (TUNISIA, COUNTRY, "", PLAINS, 1, True),
)

ALL_SPACES = tuple(sorted(d[0] for d in SPACE_DEFINITIONS))
COUNTRY_SPACES = (MOROCCO, TUNISIA)

# Map adjacency, one entry per space (symmetric) — map
ADJACENCIES = {
    BARIKA: (BISKRA, SIDI_AISSA, BORDJ_BOU_ARRERIDJ, SETIF, PHILIPPEVILLE,
             OUM_EL_BOUAGHI, BATNA),
    BATNA: (BISKRA, BARIKA, OUM_EL_BOUAGHI, NEGRINE),
    BISKRA: (LAGHOUAT, SIDI_AISSA, BARIKA, BATNA, NEGRINE, TUNISIA),
    OUM_EL_BOUAGHI: (BATNA, BARIKA, PHILIPPEVILLE, SOUK_AHRAS, TEBESSA,
                     NEGRINE),
    TEBESSA: (NEGRINE, OUM_EL_BOUAGHI, SOUK_AHRAS, TUNISIA),
    NEGRINE: (BISKRA, BATNA, OUM_EL_BOUAGHI, TEBESSA, TUNISIA),
    CONSTANTINE: (SETIF, PHILIPPEVILLE),
    SETIF: (CONSTANTINE, PHILIPPEVILLE, BARIKA, BORDJ_BOU_ARRERIDJ, BOUGIE),
    PHILIPPEVILLE: (CONSTANTINE, SOUK_AHRAS, OUM_EL_BOUAGHI, BARIKA, SETIF),
    SOUK_AHRAS: (PHILIPPEVILLE, TUNISIA, TEBESSA, OUM_EL_BOUAGHI),
    TIZI_OUZOU: (BOUGIE, BORDJ_BOU_ARRERIDJ, MEDEA),
    BORDJ_BOU_ARRERIDJ: (BOUGIE, SETIF, BARIKA, SIDI_AISSA, MEDEA,
                         TIZI_OUZOU),
    BOUGIE: (TIZI_OUZOU, SETIF, BORDJ_BOU_ARRERIDJ),
    ALGIERS: (MEDEA,),
    MEDEA: (ALGIERS, TIZI_OUZOU, BORDJ_BOU_ARRERIDJ, SIDI_AISSA,
            AIN_OUSSERA, ORLEANSVILLE),
    ORLEANSVILLE: (MEDEA, AIN_OUSSERA, TIARET, MOSTAGANEM),
    ORAN: (SIDI_BEL_ABBES,),
    MECHERIA: (MOROCCO, TLEMCEN, SAIDA, AIN_SEFRA),
    TLEMCEN: (MOROCCO, SIDI_BEL_ABBES, SAIDA, MECHERIA),
    SIDI_BEL_ABBES: (ORAN, TLEMCEN, MOSTAGANEM, MASCARA, SAIDA),
    MOSTAGANEM: (SIDI_BEL_ABBES, ORLEANSVILLE, TIARET, MASCARA),
    SAIDA: (MECHERIA, TLEMCEN, SIDI_BEL_ABBES, MASCARA, AIN_SEFRA),
    MASCARA: (SAIDA, SIDI_BEL_ABBES, MOSTAGANEM, TIARET, AIN_SEFRA),
    TIARET: (MASCARA, MOSTAGANEM, ORLEANSVILLE, AIN_OUSSERA, AIN_SEFRA),
    AIN_SEFRA: (MOROCCO, MECHERIA, SAIDA, MASCARA, TIARET, AIN_OUSSERA,
                LAGHOUAT),
    LAGHOUAT: (AIN_SEFRA, AIN_OUSSERA, SIDI_AISSA, BISKRA),
    SIDI_AISSA: (BISKRA, LAGHOUAT, AIN_OUSSERA, MEDEA, BORDJ_BOU_ARRERIDJ,
                 BARIKA),
    AIN_OUSSERA: (LAGHOUAT, AIN_SEFRA, TIARET, ORLEANSVILLE, MEDEA,
                  SIDI_AISSA),
    MOROCCO: (TLEMCEN, MECHERIA, AIN_SEFRA),
    TUNISIA: (SOUK_AHRAS, TEBESSA, NEGRINE, BISKRA),
}


# ============================================================================
# TRACKS AND LIMITS (§1.8, §6.0)
# ============================================================================

EDGE_TRACK_MAX = 50       # Resources and Commitment — §1.8
FRANCE_TRACK_MAX = 5      # 0 (A) to 5 (F) — §6.3.3
BORDER_ZONE_TRACK_MAX = 4

# (letter, commitment, FLN resources) per France track position — §6.3.3
FRANCE_TRACK = (
    ("A", 0, 1),
    ("B", 1, 2),
    ("C", 2, 3),
    ("D", 2, 4),
    ("E", 3, 5),
    ("F", 3, 6),
)

MAX_BASES_PER_SPACE = 2          # §1.4.2
MAX_BASES_WITH_MARKER = 3        # +1 Base marker — card 43

# Pass income — §2.3.3
PASS_INCOME = {GOV: 2, FLN: 1}

# Die
DIE_MIN = 1
DIE_MAX = 6


# ============================================================================
# SEQUENCE OF PLAY (§2.3)
# ============================================================================

ACTION_PASS = "Pass"
ACTION_EVENT = "Execute Event"
ACTION_OP_PLUS_SA = "Execute Op & Special Activity"
ACTION_LIMITED_OP = "Execute Limited Op"
ACTION_OP_ONLY = "Execute Op Only"

ALL_ACTIONS = (
    ACTION_EVENT, ACTION_OP_PLUS_SA, ACTION_OP_ONLY, ACTION_LIMITED_OP,
    ACTION_PASS,
)

# Actions open to the second eligible faction, keyed by the first's — §2.3.4
SECOND_ACTIONS = {
    None: ALL_ACTIONS,
    ACTION_PASS: ALL_ACTIONS,
    ACTION_EVENT: (ACTION_OP_PLUS_SA, ACTION_PASS),
    ACTION_OP_PLUS_SA: (ACTION_EVENT, ACTION_LIMITED_OP, ACTION_PASS),
    ACTION_LIMITED_OP: (ACTION_OP_PLUS_SA, ACTION_OP_ONLY, ACTION_PASS),
    ACTION_OP_ONLY: (ACTION_LIMITED_OP, ACTION_PASS),
}

# First eligible keeps the initiative after these actions — §2.3.6
RETAIN_INITIATIVE = (ACTION_PASS, ACTION_EVENT, ACTION_LIMITED_OP)


# ============================================================================
# EVENTS (§5.0)
# ============================================================================

EVENT_UNSHADED = "Unshaded"
EVENT_SHADED = "Shaded"
EVENT_NONE = "No Event"

CARD_COUNT = 71

# Card numbers referenced by name in bot logic
CARD_PEACE_OF_THE_BRAVE = 5
CARD_MOUDJAHIDINE = 10
CARD_COMMANDOS = 17
CARD_DEAD_ZONE = 27          # Covert Movement, Government side
CARD_TELEB = 32
CARD_PARANOIA = 44
CARD_POPULATION_CONTROL = 53
CARD_HARDENED_ATTITUDES = 56
CARD_PEACE_TALKS = 57
CARD_MOROCCO_TUNISIA_INDEPENDENT = 61

# Capability names by (card, side) — §5.3
CAPABILITY_NAMES = {
    (13, EVENT_UNSHADED): "Gov:SAS",
    (13, EVENT_SHADED): "FLN:SAS",
    (17, EVENT_UNSHADED): "Gov:Commandos de Chasse",
    (17, EVENT_SHADED): "FLN:Zonal Commandos",
    (18, EVENT_UNSHADED): "Dual:Torture",
    (27, EVENT_UNSHADED): "Gov:Dead Zone",
    (27, EVENT_SHADED): "FLN:X Wilaya Coord",
    (32, EVENT_UNSHADED): "Gov:Amateur Bomber",
    (32, EVENT_SHADED): "FLN:Taleb",
    (33, EVENT_UNSHADED): "Gov:Overkill",
    (33, EVENT_SHADED): "FLN:Revenge",
    (35, EVENT_UNSHADED): "Gov:Napalm",
    (35, EVENT_SHADED): "FLN:Scorch",
    (63, EVENT_UNSHADED): "Dual:OAS",
}

GOV_CAPABILITIES = tuple(
    key for key, name in CAPABILITY_NAMES.items() if name.startswith("Gov:")
)

# Momentum names by (card, side) — §5.4
MOMENTUM_NAMES = {
    (2, EVENT_SHADED): "FLN:Balky Conscripts",
    (5, EVENT_UNSHADED): "Gov:Peace of the Brave",
    (10, EVENT_SHADED): "FLN:Moudjahidine",
    (11, EVENT_UNSHADED): "Gov:Bananes",
    (12, EVENT_UNSHADED): "Gov:Ventilos",
    (29, EVENT_SHADED): "FLN:The Call Up",
    (31, EVENT_UNSHADED): "Gov:Intimidation",
    (40, EVENT_SHADED): "FLN:Strategic Movement",
    (44, EVENT_UNSHADED): "Gov:Paranoia",
    (45, EVENT_UNSHADED): "Gov:Challe Plan",
    (45, EVENT_SHADED): "FLN:Challe Plan",
    (46, EVENT_UNSHADED): "Gov:Moghazni",
    (53, EVENT_UNSHADED): "Gov:Population Control",
    (56, EVENT_UNSHADED): "Dual:Hardened Attitudes",
    (57, EVENT_UNSHADED): "Dual:Peace Talks",
}


# ============================================================================
# BOT THRESHOLDS (FLN flowchart)
# ============================================================================

EXTORT_RESOURCE_LIMIT = 5            # Extort only below 5 resources
RALLY_UNLIMITED_BELOW = 9            # maxTotalRallies unlimited below 9
NO_AMBUSH_MIN_GUERRILLAS = 6
FOLLOWUP_ATTACK_MIN_GUERRILLAS = 4
EVENT_ROLL_LIMIT = 5                 # Play an effective event on 1-4
MARCH_ACTIVATION_LIMIT = 3           # Group + cubes (+ border) over 3
BASE_SITE_GUERRILLAS = 3
SUPPORT_CITY_GUERRILLAS = 2


# ============================================================================
# OPTIONS
# ============================================================================

# Marching into a City under Population Control activates when more
# cubes than this are present.
OPT_POPULATION_CONTROL_CITY_CUBES = "population_control_city_cubes"

DEFAULT_OPTIONS = {
    OPT_POPULATION_CONTROL_CITY_CUBES: 2,
}


# ============================================================================
# CARD CATALOG (Card Reference)
# ============================================================================

CARD_NAMES = {
    1: "Quadrillage",
    2: "Balky Conscripts",
    3: "Leadership Snatch",
    4: "Oil & Gas Discoveries",
    5: "Peace of the Brave",
    6: "Factionalism",
    7: "5th Bureau",
    8: "Cross-border air strike",
    9: "Beni-Oui-Oui",
    10: "Moudjahidine",
    11: "Bananes",
    12: "Ventilos",
    13: "SAS",
    14: "Protest in Paris",
    15: "Jean-Paul Sartre",
    16: "NATO",
    17: "Commandos",
    18: "Torture",
    19: "General Strike",
    20: "Suave qui peut",
    21: "United Nations Resolution",
    22: "The Government of USA is Convinced...",
    23: "Diplomatic Leanings",
    24: "Economic Development",
    25: "Purge",
    26: "Casbah",
    27: "Covert Movement",
    28: "Atrocities and Reprisals",
    29: "The Call Up",
    30: "Change in Tactics",
    31: "Intimidation",
    32: "Teleb the Bomb-maker",
    33: "Overkill",
    34: "Elections",
    35: "Napalm",
    36: "Assassination",
    37: "Integration",
    38: "Economic Crisis in France",
    39: "Retreat into Djebel",
    40: "Strategic Movement",
    41: "Egypt",
    42: "Czech Arms Deal",
    43: "Refugees",
    44: "Paranoia",
    45: "Challe Plan",
    46: "Moghazni",
    47: "Third Force",
    48: "Ultras",
    49: "Factional Plot",
    50: "Bleuite",
    51: "Stripey Hole",
    52: "Cabinet Shuffle",
    53: "Population Control",
    54: "Operation 744",
    55: "Development",
    56: "Hardened Attitudes",
    57: "Peace Talks",
    58: "Army in Waiting",
    59: "Bandung Conference",
    60: "Soummam Conference",
    61: "Morocco and Tunisia Independent",
    62: "Suez Crisis",
    63: "OAS",
    64: "Mobilization",
    65: "Recall De Gaulle",
    66: "Coup d'etat",
    67: "Propaganda!",
    68: "Propaganda!",
    69: "Propaganda!",
    70: "Propaganda!",
    71: "Propaganda!",
}

# Cards with a single event text (no shaded side)
SINGLE_EVENT_CARDS = frozenset(
    (4, 9, 14, 18, 20, 25, 28, 30, 52, 54, 56, 57) + tuple(range(61, 72))
)

# Cards carrying the FLN Bot marker
FLN_MARKED_CARDS = frozenset((
    3, 7, 9, 10, 11, 12, 14, 18, 19, 20, 22, 23, 24, 26, 28, 31, 33, 34,
    35, 36, 41, 42, 43, 47, 48, 49, 51, 53, 54, 55, 56, 57, 59, 60,
))

CAPABILITY_CARDS = frozenset(card for card, _ in CAPABILITY_NAMES)

FLN_PIVOTAL_CARDS = frozenset((61, 62))
GOV_PIVOTAL_CARDS = frozenset((64, 65, 66))
PROPAGANDA_CARDS = frozenset(range(67, 72))
