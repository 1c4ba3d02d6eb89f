"""
AI Dictionary Loader for the GS1 syntax engine

Loads and manages the GS1 Application Identifier dictionary.
Based on GS1 Barcode Syntax Dictionary specification.

Each dictionary line has the form:

    AI[-AI]  [flags]  COMPONENT...  [attribute...]  # TITLE

    flags       '*' predefined length (no FNC1 required after the value)
                '?' not permitted as a GS1 Digital Link URI data attribute
    COMPONENT   <cset><length>[,linter...], optional components in [...]
                cset is N (digits), X (CSET 82), Y (CSET 39) or Z (CSET 64)
                length is N (fixed) or ..N (1 to N characters)
    attributes  req=A,B+C   one of A or (B and C) must be present
                ex=A,B      A and B must not be present; 'n' matches any digit
                dlpkey[=Q1,Q2|Q3]
                            Digital Link primary key, with its alternative
                            ordered sequences of key qualifiers
                rep         AI may appear more than once

Reference: https://ref.gs1.org/tools/gs1-barcode-syntax-resource/syntax-dictionary/
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..validators.linters import LINTERS


LOGGER = logging.getLogger(__name__)

UNKNOWN_AI_TITLE = "UNKNOWN"


@dataclass
class Component:
    """
    One component of an AI value.

    Attributes:
        cset: 'N', 'X', 'Y' or 'Z'
        min_length: Minimum component length
        max_length: Maximum component length
        optional: Component may be omitted (only trailing components are)
        linters: Linter names run in order after the character set check
    """
    cset: str
    min_length: int
    max_length: int
    optional: bool = False
    linters: List[str] = field(default_factory=list)

    @property
    def fixed(self) -> bool:
        return self.min_length == self.max_length


@dataclass
class AIEntry:
    """
    Represents a single GS1 Application Identifier entry.

    Attributes:
        ai: The Application Identifier code (2-4 digits)
        title: Human-readable title/name
        components: Ordered value components
        fnc1_required: False for AIs with a predefined length
        dl_data_attr: False when the AI may not be a Digital Link query attribute
        repeatable: AI may occur more than once in a message
        required_ais: Requisite groups; each group lists alternatives, each
            alternative lists AIs that must all be present
        exclusive_ais: AI patterns that cannot be present with this AI
        dl_primary_key: AI is a GS1 Digital Link primary key
        dl_key_qualifiers: Alternative ordered key qualifier sequences
        unknown: Entry was inferred for an AI absent from the dictionary
    """
    ai: str
    title: str
    components: List[Component] = field(default_factory=list)
    fnc1_required: bool = True
    dl_data_attr: bool = True
    repeatable: bool = False
    required_ais: List[List[List[str]]] = field(default_factory=list)
    exclusive_ais: List[str] = field(default_factory=list)
    dl_primary_key: bool = False
    dl_key_qualifiers: List[List[str]] = field(default_factory=list)
    unknown: bool = False

    @property
    def min_length(self) -> int:
        return sum(c.min_length for c in self.components if not c.optional)

    @property
    def max_length(self) -> int:
        return sum(c.max_length for c in self.components)

    @property
    def fixed_length(self) -> Optional[int]:
        """Length of a predefined-length AI, None otherwise."""
        return None if self.fnc1_required else self.max_length

    @property
    def data_type(self) -> str:
        """'N' if every component is numeric, 'X' otherwise."""
        if self.components and all(c.cset == 'N' for c in self.components):
            return 'N'
        return 'X'

    @property
    def decimal_positions(self) -> Optional[int]:
        """Implied decimal places for the 3xxx measure and amount AIs."""
        if len(self.ai) == 4 and self.ai[0] == '3':
            return int(self.ai[3])
        return None

    @property
    def qualifier_ais(self) -> List[str]:
        seen: List[str] = []
        for sequence in self.dl_key_qualifiers:
            for ai in sequence:
                if ai not in seen:
                    seen.append(ai)
        return seen


class TrieNode:
    """Trie node for efficient AI prefix matching."""
    __slots__ = ['children', 'ai_entry', 'is_end']

    def __init__(self):
        self.children: Dict[str, TrieNode] = {}
        self.ai_entry: Optional[AIEntry] = None
        self.is_end: bool = False


class AITrie:
    """
    Trie data structure for O(k) AI lookup where k is AI length (2-4).
    Supports longest-prefix matching for efficient parsing.
    """

    def __init__(self):
        self.root = TrieNode()

    def insert(self, ai: str, entry: AIEntry) -> None:
        """Insert an AI entry into the trie."""
        node = self.root
        for char in ai:
            if char not in node.children:
                node.children[char] = TrieNode()
            node = node.children[char]
        node.is_end = True
        node.ai_entry = entry

    def find_longest_match(self, text: str, start: int = 0) -> Tuple[Optional[AIEntry], int]:
        """
        Find the longest matching AI starting at position 'start'.
        Returns (AIEntry, length) or (None, 0) if no match.
        """
        node = self.root
        last_match: Optional[AIEntry] = None
        last_match_len = 0

        for i, char in enumerate(text[start:start + 4]):  # Max AI length is 4
            if char not in node.children:
                break
            node = node.children[char]
            if node.is_end:
                last_match = node.ai_entry
                last_match_len = i + 1

        return last_match, last_match_len


# AI length by the first two digits of an AI. Prefixes absent from this
# table belong to no documented AI family.
_AI_LENGTH_BY_PREFIX: Dict[str, int] = {}
for _prefix, _length in (
    (range(0, 5), 2), (range(10, 23), 2), (range(23, 26), 3), (range(30, 31), 2),
    (range(31, 37), 4), (range(37, 38), 2), (range(39, 40), 4), (range(40, 43), 3),
    (range(43, 44), 4), (range(70, 71), 4), (range(71, 72), 3), (range(72, 73), 4),
    (range(80, 83), 4), (range(90, 100), 2),
):
    for _p in _prefix:
        _AI_LENGTH_BY_PREFIX[f"{_p:02d}"] = _length

# Value length of AIs in the GS1 predefined-length table, by first two digits
PREDEFINED_LENGTHS: Dict[str, int] = {
    '00': 18, '01': 14, '02': 14, '03': 14, '04': 16,
    '11': 6, '12': 6, '13': 6, '14': 6, '15': 6, '16': 6, '17': 6, '18': 6, '19': 6,
    '20': 2,
    '31': 6, '32': 6, '33': 6, '34': 6, '35': 6, '36': 6,
    '41': 13,
}


def ai_length_for_prefix(text: str) -> Optional[int]:
    """Length of the AI that text starts with, from its first two digits."""
    return _AI_LENGTH_BY_PREFIX.get(text[:2]) if text[:2].isdigit() else None


def vivify_ai(ai: str) -> Optional[AIEntry]:
    """
    Infer a specification for an AI that has no dictionary entry.

    The AI must have the length its family's two digit prefix requires.
    AIs in the predefined-length table are numeric of that length; any
    other AI may carry up to 90 CSET 82 characters.

    Returns:
        An entry flagged unknown, or None if the AI fits no family
    """
    if not ai.isdigit() or ai_length_for_prefix(ai) != len(ai):
        return None

    predefined = PREDEFINED_LENGTHS.get(ai[:2])
    if predefined:
        component = Component('N', predefined, predefined)
    else:
        component = Component('X', 1, 90)

    return AIEntry(
        ai=ai,
        title=UNKNOWN_AI_TITLE,
        components=[component],
        fnc1_required=predefined is None,
        unknown=True,
    )


def _parse_syntax_spec(spec: str) -> Component:
    """
    Parse one component of a syntax dictionary specification.

    Examples:
        "N14" -> Component('N', 14, 14)
        "X..20" -> Component('X', 1, 20)
        "N6,yymmd0" -> Component('N', 6, 6, linters=['yymmd0'])
        "[N..12]" -> Component('N', 1, 12, optional=True)
    """
    optional = spec.startswith('[') and spec.endswith(']')
    if optional:
        spec = spec[1:-1]

    parts = spec.split(',')
    match = re.fullmatch(r'([NXYZ])(\.\.)?(\d+)', parts[0])
    if not match:
        raise ValueError(f"Bad component specification: {spec}")

    cset, variable, length = match.group(1), match.group(2), int(match.group(3))
    linters = parts[1:]
    for name in linters:
        if name not in LINTERS:
            raise ValueError(f"Unknown linter '{name}' in component {spec}")

    return Component(
        cset=cset,
        min_length=1 if variable else length,
        max_length=length,
        optional=optional,
        linters=linters,
    )


def _parse_ai_range(token: str) -> List[str]:
    """'3100-3105' -> ['3100', ..., '3105']"""
    if '-' not in token:
        return [token]
    start, end = token.split('-')
    if len(start) != len(end) or start[:-1] != end[:-1]:
        raise ValueError(f"Bad AI range: {token}")
    return [start[:-1] + str(d) for d in range(int(start[-1]), int(end[-1]) + 1)]


def parse_dictionary_text(text: str) -> Dict[str, AIEntry]:
    """Parse syntax dictionary text into AIEntry objects keyed by AI."""
    entries: Dict[str, AIEntry] = {}

    for line in text.strip().split('\n'):
        line = line.strip()
        if not line or line.startswith('#'):
            continue

        main_part, _, title = line.partition('#')
        tokens = main_part.split()
        ai_token = tokens.pop(0)

        flags = ''
        if tokens and re.fullmatch(r'[*?]+', tokens[0]):
            flags = tokens.pop(0)

        components = []
        while tokens and re.match(r'\[?[NXYZ]', tokens[0]):
            components.append(_parse_syntax_spec(tokens.pop(0)))
        if not components:
            raise ValueError(f"No components for AI {ai_token}")

        required_ais: List[List[List[str]]] = []
        exclusive_ais: List[str] = []
        qualifiers: List[List[str]] = []
        dl_primary_key = False
        repeatable = False

        for attr in tokens:
            if attr.startswith('req='):
                required_ais.append([alt.split('+') for alt in attr[4:].split(',')])
            elif attr.startswith('ex='):
                exclusive_ais.extend(attr[3:].split(','))
            elif attr == 'dlpkey':
                dl_primary_key = True
            elif attr.startswith('dlpkey='):
                dl_primary_key = True
                qualifiers = [seq.split(',') for seq in attr[7:].split('|')]
            elif attr == 'rep':
                repeatable = True
            else:
                raise ValueError(f"Unknown attribute '{attr}' for AI {ai_token}")

        for ai in _parse_ai_range(ai_token):
            if ai in entries:
                raise ValueError(f"Duplicate AI {ai}")
            entries[ai] = AIEntry(
                ai=ai,
                title=title.strip(),
                components=components,
                fnc1_required='*' not in flags,
                dl_data_attr='?' not in flags,
                repeatable=repeatable,
                required_ais=required_ais,
                exclusive_ais=exclusive_ais,
                dl_primary_key=dl_primary_key,
                dl_key_qualifiers=qualifiers,
            )

    return entries


# GS1 AI Dictionary
# Based on GS1 Barcode Syntax Dictionary and GS1 General Specifications
# Reference: https://ref.gs1.org/ai/
RAW_AI_DICTIONARY = """
# AI      Flags  Components                           Attributes                                     Title
00          *?   N18,csum,gcppos2                     dlpkey                                         # SSCC
01          *?   N14,csum,gcppos2                     ex=02,255,37 dlpkey=22,10,21|235               # GTIN
02          *    N14,csum,gcppos2                     req=37 ex=01,03                                # CONTENT
03          *    N14,csum,gcppos2                     req=8008 ex=01,02,37                           # MTO GTIN
10               X..20                                req=01,02,03,8006,8026                         # BATCH/LOT
11          *    N6,yymmd0                            req=01,02,03,8006,8026                         # PROD DATE
12          *    N6,yymmd0                            req=8020                                       # DUE DATE
13          *    N6,yymmd0                            req=01,02,03,8006,8026                         # PACK DATE
15          *    N6,yymmd0                            req=01,02,03,8006,8026                         # BEST BEFORE or BEST BY
16          *    N6,yymmd0                            req=01,02,03,8006,8026                         # SELL BY
17          *    N6,yymmd0                            req=01,02,03,8006,8026                         # USE BY or EXPIRY
20          *    N2                                   req=01,02,03                                   # VARIANT
21               X..20                                req=01,03,8006 ex=235                          # SERIAL
22               X..20                                req=01                                         # CPV
235              X..28                                req=01 ex=21                                   # TPX
240              X..30                                req=01,02,8006,8026                            # ADDITIONAL ID
241              X..30                                req=01,02,8006,8026                            # CUST. PART No.
242              N..6                                 req=01,8006                                    # MTO VARIANT
243              X..20                                req=01                                         # PCN
250              X..30                                req=01,8006 req=21                             # SECONDARY SERIAL
251              X..30                                req=01,8006                                    # REF. TO SOURCE
253          ?   N13,csum,gcppos1 [X..17]             dlpkey                                         # GDTI
254              X..20                                req=414                                        # GLN EXTENSION COMPONENT
255          ?   N13,csum,gcppos1 [N..12]             ex=01,02,415,8006,8020,8026 dlpkey             # GCN
30               N..8                                 req=01,02                                      # VAR. COUNT
3100-3105   *    N6                                   req=01,02                                      # NET WEIGHT (kg)
3110-3115   *    N6                                   req=01,02                                      # LENGTH (m)
3120-3125   *    N6                                   req=01,02                                      # WIDTH (m)
3130-3135   *    N6                                   req=01,02                                      # HEIGHT (m)
3140-3145   *    N6                                   req=01,02                                      # AREA (m²)
3150-3155   *    N6                                   req=01,02                                      # NET VOLUME (l)
3160-3165   *    N6                                   req=01,02                                      # NET VOLUME (m³)
3200-3205   *    N6                                   req=01,02                                      # NET WEIGHT (lb)
3210-3215   *    N6                                   req=01,02                                      # LENGTH (in)
3220-3225   *    N6                                   req=01,02                                      # LENGTH (ft)
3230-3235   *    N6                                   req=01,02                                      # LENGTH (yd)
3240-3245   *    N6                                   req=01,02                                      # WIDTH (in)
3250-3255   *    N6                                   req=01,02                                      # WIDTH (ft)
3260-3265   *    N6                                   req=01,02                                      # WIDTH (yd)
3270-3275   *    N6                                   req=01,02                                      # HEIGHT (in)
3280-3285   *    N6                                   req=01,02                                      # HEIGHT (ft)
3290-3295   *    N6                                   req=01,02                                      # HEIGHT (yd)
3300-3305   *    N6                                   req=00,01                                      # GROSS WEIGHT (kg)
3310-3315   *    N6                                   req=00,01                                      # LENGTH (m), log
3320-3325   *    N6                                   req=00,01                                      # WIDTH (m), log
3330-3335   *    N6                                   req=00,01                                      # HEIGHT (m), log
3340-3345   *    N6                                   req=00,01                                      # AREA (m²), log
3350-3355   *    N6                                   req=00,01                                      # VOLUME (l), log
3360-3365   *    N6                                   req=00,01                                      # VOLUME (m³), log
3370-3375   *    N6                                   req=01                                         # KG PER m²
3400-3405   *    N6                                   req=00,01                                      # GROSS WEIGHT (lb)
3410-3415   *    N6                                   req=00,01                                      # LENGTH (in), log
3420-3425   *    N6                                   req=00,01                                      # LENGTH (ft), log
3430-3435   *    N6                                   req=00,01                                      # LENGTH (yd), log
3440-3445   *    N6                                   req=00,01                                      # WIDTH (in), log
3450-3455   *    N6                                   req=00,01                                      # WIDTH (ft), log
3460-3465   *    N6                                   req=00,01                                      # WIDTH (yd), log
3470-3475   *    N6                                   req=00,01                                      # HEIGHT (in), log
3480-3485   *    N6                                   req=00,01                                      # HEIGHT (ft), log
3490-3495   *    N6                                   req=00,01                                      # HEIGHT (yd), log
3500-3505   *    N6                                   req=01,02                                      # AREA (in²)
3510-3515   *    N6                                   req=01,02                                      # AREA (ft²)
3520-3525   *    N6                                   req=01,02                                      # AREA (yd²)
3530-3535   *    N6                                   req=00,01                                      # AREA (in²), log
3540-3545   *    N6                                   req=00,01                                      # AREA (ft²), log
3550-3555   *    N6                                   req=00,01                                      # AREA (yd²), log
3560-3565   *    N6                                   req=01,02                                      # NET WEIGHT (t oz)
3570-3575   *    N6                                   req=01,02                                      # NET VOLUME (oz)
3600-3605   *    N6                                   req=01,02                                      # NET VOLUME (qt)
3610-3615   *    N6                                   req=01,02                                      # NET VOLUME (gal.)
3620-3625   *    N6                                   req=00,01                                      # VOLUME (qt), log
3630-3635   *    N6                                   req=00,01                                      # VOLUME (gal.), log
3640-3645   *    N6                                   req=01,02                                      # VOLUME (in³)
3650-3655   *    N6                                   req=01,02                                      # VOLUME (ft³)
3660-3665   *    N6                                   req=01,02                                      # VOLUME (yd³)
3670-3675   *    N6                                   req=00,01                                      # VOLUME (in³), log
3680-3685   *    N6                                   req=00,01                                      # VOLUME (ft³), log
3690-3695   *    N6                                   req=00,01                                      # VOLUME (yd³), log
37               N..8                                 req=02,8026                                    # COUNT
3900-3909        N..15                                req=255,8020 ex=391n,394n,8111                 # AMOUNT
3910-3919        N3,iso4217 N..15                     req=255,8020 ex=390n,394n,8111                 # AMOUNT
3920-3929        N..15                                req=01 ex=393n                                 # PRICE
3930-3939        N3,iso4217 N..15                     req=01 ex=392n                                 # PRICE
3940-3943        N4                                   req=255 ex=390n,391n,8111                      # PRCNT OFF
3950-3955        N6                                   req=01 ex=392n,393n                            # PRICE/UoM
400              X..30                                                                               # ORDER NUMBER
401          ?   X..30,gcppos1                        dlpkey                                         # GINC
402          ?   N17,csum,gcppos1                     dlpkey                                         # GSIN
403              X..30                                req=00                                         # ROUTE
410         *    N13,csum,gcppos1                                                                    # SHIP TO LOC
411         *    N13,csum,gcppos1                                                                    # BILL TO
412         *    N13,csum,gcppos1                                                                    # PURCHASE FROM
413         *    N13,csum,gcppos1                                                                    # SHIP FOR LOC
414         *?   N13,csum,gcppos1                     dlpkey=254|7040                                # LOC No.
415         *    N13,csum,gcppos1                     req=8020                                       # PAY TO
416         *    N13,csum,gcppos1                                                                    # PROD/SERV LOC
417         *?   N13,csum,gcppos1                     dlpkey=7040                                    # PARTY
420              X..20                                ex=421                                         # SHIP TO POST
421              N3,iso3166 X..9                      ex=420                                         # SHIP TO POST
422              N3,iso3166                           req=01,02                                      # ORIGIN
423              N3,iso3166 [N..12,iso3166list]       req=01,02                                      # COUNTRY - INITIAL PROCESS.
424              N3,iso3166                           req=01,02                                      # COUNTRY - PROCESS.
425              N3,iso3166 [N..12,iso3166list]       req=01,02                                      # COUNTRY - DISASSEMBLY
426              N3,iso3166                           req=01,02                                      # COUNTRY - FULL PROCESS
427              X..3                                 req=422                                        # ORIGIN SUBDIVISION
4300             X..35,pcenc                          req=00                                         # SHIP TO COMP
4301             X..35,pcenc                          req=00                                         # SHIP TO NAME
4302             X..70,pcenc                          req=00                                         # SHIP TO ADD1
4303             X..70,pcenc                          req=4302                                       # SHIP TO ADD2
4304             X..70,pcenc                          req=00                                         # SHIP TO SUB
4305             X..70,pcenc                          req=00                                         # SHIP TO LOC
4306             X..70,pcenc                          req=00                                         # SHIP TO REG
4307             X2,iso3166alpha2                     req=00                                         # SHIP TO COUNTRY
4308             X..30                                req=00                                         # SHIP TO PHONE
4309             N20,latlong                          req=00                                         # SHIP TO GEO
4310             X..35,pcenc                          req=00                                         # RTN TO COMP
4311             X..35,pcenc                          req=00                                         # RTN TO NAME
4312             X..70,pcenc                          req=00                                         # RTN TO ADD1
4313             X..70,pcenc                          req=4312                                       # RTN TO ADD2
4314             X..70,pcenc                          req=00                                         # RTN TO SUB
4315             X..70,pcenc                          req=00                                         # RTN TO LOC
4316             X..70,pcenc                          req=00                                         # RTN TO REG
4317             X2,iso3166alpha2                     req=00                                         # RTN TO COUNTRY
4318             X..20                                req=00                                         # RTN TO POST
4319             X..30                                req=00                                         # RTN TO PHONE
4320             X..35,pcenc                          req=00                                         # SRV DESCRIPTION
4321             N1,yesno                             req=00                                         # DANGEROUS GOODS
4322             N1,yesno                             req=00                                         # AUTH LEAVE
4323             N1,yesno                             req=00                                         # SIG REQUIRED
4324             N6,yymmd0 N4,hhmi                    req=00                                         # NBEF DEL DT
4325             N6,yymmd0 N4,hhmi                    req=00                                         # NAFT DEL DT
4326             N6,yymmdd                            req=00                                         # REL DATE
4330             N6 [X1,hyphen]                       req=00                                         # MAX TEMP F
4331             N6 [X1,hyphen]                       req=00                                         # MAX TEMP C
4332             N6 [X1,hyphen]                       req=00                                         # MIN TEMP F
4333             N6 [X1,hyphen]                       req=00                                         # MIN TEMP C
7001             N13                                  req=01,02                                      # NSN
7002             X..30                                req=01,02                                      # MEAT CUT
7003             N6,yymmdd N4,hhmi                    req=01,02                                      # EXPIRY TIME
7004             N..4                                 req=01,02                                      # ACTIVE POTENCY
7005             X..12                                req=01,02                                      # CATCH AREA
7006             N6,yymmdd                            req=01,02                                      # FIRST FREEZE DATE
7007             N6,yymmdd [N6,yymmdd]                req=01,02                                      # HARVEST DATE
7008             X..3                                 req=01,02                                      # AQUATIC SPECIES
7009             X..10                                req=01,02                                      # FISHING GEAR TYPE
7010             X..2                                 req=01,02                                      # PROD METHOD
7011             N6,yymmdd [N4,hhmi]                  req=01,02                                      # TEST BY DATE
7020             X..20                                req=01,8004                                    # REFURB LOT
7021             X..20                                req=01,8004                                    # FUNC STAT
7022             X..20                                req=7021                                       # REV STAT
7023             X..30,gcppos1                        req=8004                                       # GIAI - ASSEMBLY
7030-7039        N3,iso3166999 X..27                  req=01,02                                      # PROCESSOR # s
7040             N1 X1 X1 X1,importeridx                                                             # UIC+EXT
7041             X..4                                 req=00                                         # UFRGT UNIT TYPE
710              X..20                                req=01                                         # NHRN PZN
711              X..20                                req=01                                         # NHRN CIP
712              X..20                                req=01                                         # NHRN CN
713              X..20                                req=01                                         # NHRN DRN
714              X..20                                req=01                                         # NHRN AIM
715              X..20                                req=01                                         # NHRN NDC
716              X..20                                req=01                                         # NHRN AIC
7230-7239        X2 X..28                             req=01,02,8004                                 # CERT # s
7240             X..20                                req=01,8004                                    # PROTOCOL
7241             N2,mediatype                         req=8017,8018                                  # AIDC MEDIA TYPE
7242             X..25                                req=8017,8018                                  # VCN
7250             N8,yyyymmdd                          req=8017,8018                                  # DOB
7251             N8,yyyymmdd N4,hhmi                  req=8017,8018                                  # DOB TIME
7252             N1,iso5218                           req=8017,8018                                  # BIO SEX
7253             X..40,pcenc                          req=8017,8018                                  # FAMILY NAME
7254             X..40,pcenc                          req=8017,8018                                  # GIVEN NAME
7255             X..10                                req=8017,8018                                  # SUFFIX
7256             X..90,pcenc                          req=8017,8018                                  # FULL NAME
7257             X..70,pcenc                          req=8017,8018                                  # PERSON ADDR
7258             X3,posinseqslash                     req=8017,8018                                  # BIRTH SEQUENCE
7259             X..40,pcenc                          req=8017,8018                                  # BABY
8001             N4,nonzero N5,nonzero N3,nonzero N1,winding N1    req=01                           # DIMENSIONS
8002             X..20                                                                               # CMT No.
8003         ?   N1,zero N13,csum,gcppos1 [X..16]     dlpkey                                         # GRAI
8004         ?   X..30,gcppos1                        dlpkey=7040                                    # GIAI
8005             N6                                   req=01,02                                      # PRICE PER UNIT
8006         ?   N14,csum,gcppos2 N4,pieceoftotal     ex=01,37 dlpkey=22,10,21                       # ITIP
8007             X..34,iban                           req=415                                        # IBAN
8008             N8,yymmddhh [N..4,mmoptss]           req=01,02                                      # PROD TIME
8009             X..50                                req=00,01,8004                                 # OPTSEN
8010         ?   Y..30,gcppos1                        dlpkey=8011                                    # CPID
8011             N..12,nozeroprefix                   req=8010                                       # CPID SERIAL
8012             X..20                                req=01,8006                                    # VERSION
8013         ?   X..25,csumalpha,gcppos1              dlpkey                                         # GMN
8017         ?   N18,csum,gcppos1                     ex=8018 dlpkey=8019                            # GSRN - PROVIDER
8018         ?   N18,csum,gcppos1                     ex=8017 dlpkey=8019                            # GSRN - RECIPIENT
8019             N..10                                req=8017,8018                                  # SRIN
8020             X..25                                req=415                                        # REF No.
8026             N14,csum,gcppos2 N4,pieceoftotal     req=37 ex=02,8006                              # ITIP CONTENT
8030             Z..90                                req=00,01+21,253,255,402,414,417,8003,8004,8006+21,8010+8011,8017,8018    # DIGSIG
8110             X..70,couponcode                                                                    # -
8111             N4                                   req=255                                        # POINTS
8112             X..70,couponposoffer                                                                # -
8200             X..70                                req=01                                         # PRODUCT URL
90               X..30                                                                               # INTERNAL
91-99            X..90                                                                               # INTERNAL
"""


class AIDictionary:
    """
    Manages the complete GS1 AI Dictionary with trie-based lookup.
    """

    def __init__(self, entries: Optional[Dict[str, AIEntry]] = None):
        self.trie = AITrie()
        self._entries: Dict[str, AIEntry] = {}

        if entries:
            for ai, entry in entries.items():
                self.add(ai, entry)

    @classmethod
    def from_text(cls, text: str) -> 'AIDictionary':
        """Build a dictionary from syntax dictionary text."""
        return cls(parse_dictionary_text(text))

    def add(self, ai: str, entry: AIEntry) -> None:
        """Add an AI entry to the dictionary."""
        self.trie.insert(ai, entry)
        self._entries[ai] = entry

    def get(self, ai: str) -> Optional[AIEntry]:
        """Get AI entry by code."""
        return self._entries.get(ai)

    def find_longest_match(self, text: str, start: int = 0) -> Tuple[Optional[AIEntry], int]:
        """Find longest matching AI at position."""
        return self.trie.find_longest_match(text, start)

    def __contains__(self, ai: str) -> bool:
        return ai in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def all_entries(self) -> Dict[str, AIEntry]:
        """Return all AI entries."""
        return self._entries.copy()

    def to_json(self) -> str:
        """Export dictionary to JSON."""
        data = {}
        for ai, entry in self._entries.items():
            data[ai] = {
                'ai': entry.ai,
                'title': entry.title,
                'components': [
                    {
                        'cset': c.cset,
                        'min': c.min_length,
                        'max': c.max_length,
                        'optional': c.optional,
                        'linters': c.linters,
                    }
                    for c in entry.components
                ],
                'fnc1_required': entry.fnc1_required,
                'dl_data_attr': entry.dl_data_attr,
                'repeatable': entry.repeatable,
                'required_ais': entry.required_ais,
                'exclusive_ais': entry.exclusive_ais,
                'dl_primary_key': entry.dl_primary_key,
                'dl_key_qualifiers': entry.dl_key_qualifiers,
            }
        return json.dumps(data, indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> 'AIDictionary':
        """Load dictionary from JSON."""
        data = json.loads(json_str)
        entries = {}
        for ai, info in data.items():
            entries[ai] = AIEntry(
                ai=info['ai'],
                title=info['title'],
                components=[
                    Component(
                        cset=c['cset'],
                        min_length=c['min'],
                        max_length=c['max'],
                        optional=c.get('optional', False),
                        linters=c.get('linters', []),
                    )
                    for c in info['components']
                ],
                fnc1_required=info.get('fnc1_required', True),
                dl_data_attr=info.get('dl_data_attr', True),
                repeatable=info.get('repeatable', False),
                required_ais=info.get('required_ais', []),
                exclusive_ais=info.get('exclusive_ais', []),
                dl_primary_key=info.get('dl_primary_key', False),
                dl_key_qualifiers=info.get('dl_key_qualifiers', []),
            )
        return cls(entries)


# Global cached dictionary instance
_cached_dictionary: Optional[AIDictionary] = None


def load_ai_dictionary(
    json_path: Optional[Path] = None,
    force_reload: bool = False
) -> AIDictionary:
    """
    Load the AI dictionary, using cache when possible.

    Args:
        json_path: Optional path to a prebuilt JSON dictionary file.
        force_reload: Force reload even if cached.

    Returns:
        AIDictionary instance ready for use.
    """
    global _cached_dictionary

    if _cached_dictionary is not None and not force_reload and json_path is None:
        return _cached_dictionary

    if json_path and json_path.exists():
        with open(json_path, 'r', encoding='utf-8') as f:
            _cached_dictionary = AIDictionary.from_json(f.read())
    else:
        # Parse from embedded dictionary
        _cached_dictionary = AIDictionary.from_text(RAW_AI_DICTIONARY)

    LOGGER.debug("Loaded %d AI dictionary entries", len(_cached_dictionary))
    return _cached_dictionary


def save_ai_dictionary(dictionary: AIDictionary, json_path: Path) -> None:
    """Save AI dictionary to JSON file for faster loading."""
    with open(json_path, 'w', encoding='utf-8') as f:
        f.write(dictionary.to_json())
