"""
Rule-based text QC.

Pattern checks that need no external service: repeated whitespace, sentences
starting in lowercase, house style for common scientific terms, a table of
frequent misspellings, and near-misses of known technical terms.
"""
import logging
import re
from typing import Dict, List, Optional, Tuple

import Levenshtein

from pdfqc.models.text_issues import RawTextIssue, TextIssueType
from pdfqc.services.text_qc.base_provider import TextIssueProvider

logger = logging.getLogger(__name__)

COMMON_MISSPELLINGS: Dict[str, str] = {
    "teh": "the",
    "recieve": "receive",
    "recieved": "received",
    "seperate": "separate",
    "saparate": "separate",
    "occured": "occurred",
    "occurence": "occurrence",
    "occurance": "occurrence",
    "accomodate": "accommodate",
    "definately": "definitely",
    "wierd": "weird",
    "acheive": "achieve",
    "beleive": "believe",
    "concieve": "conceive",
    "freind": "friend",
    "feild": "field",
    "foriegn": "foreign",
    "gaurd": "guard",
    "garantee": "guarantee",
    "hieght": "height",
    "hygeine": "hygiene",
    "independant": "independent",
    "liason": "liaison",
    "maintainance": "maintenance",
    "millenium": "millennium",
    "neccessary": "necessary",
    "ocasion": "occasion",
    "occassion": "occasion",
    "occassionally": "occasionally",
    "persistant": "persistent",
    "posession": "possession",
    "prefered": "preferred",
    "reccomend": "recommend",
    "recomend": "recommend",
    "refered": "referred",
    "relevent": "relevant",
    "rythm": "rhythm",
    "sieze": "seize",
    "supercede": "supersede",
    "tommorrow": "tomorrow",
    "twelth": "twelfth",
    "untill": "until",
    "wether": "whether",
    "writting": "writing",
    "writen": "written",
    "yeild": "yield",
    "alot": "a lot",
    "arguement": "argument",
    "calender": "calendar",
    "catagory": "category",
    "collegue": "colleague",
    "commitee": "committee",
    "completly": "completely",
    "concious": "conscious",
    "dissapear": "disappear",
    "embarass": "embarrass",
    "enviroment": "environment",
    "existance": "existence",
    "familar": "familiar",
    "finaly": "finally",
    "flourescent": "fluorescent",
    "goverment": "government",
    "grammer": "grammar",
    "happend": "happened",
    "immediatly": "immediately",
    "knowlege": "knowledge",
    "miniscule": "minuscule",
    "mispell": "misspell",
    "mispelled": "misspelled",
    "noticable": "noticeable",
    "peice": "piece",
    "preceeding": "preceding",
    "priviledge": "privilege",
    "publically": "publicly",
    "questionaire": "questionnaire",
    "remeber": "remember",
    "resistence": "resistance",
    "sentance": "sentence",
    "succesful": "successful",
    "suprise": "surprise",
    "temperture": "temperature",
    "tendancy": "tendency",
    "threshhold": "threshold",
    "truely": "truly",
    "unfortunatly": "unfortunately",
    "visable": "visible",
    "wich": "which",
    "thier": "their",
    "reconize": "recognize",
    "reconizing": "recognizing",
    "analyis": "analysis",
    "anlaysis": "analysis",
    "anlysis": "analysis",
    "reserch": "research",
    "resarch": "research",
    "reseach": "research",
    "experment": "experiment",
    "expiriment": "experiment",
}

# Correct spellings of domain vocabulary; close non-matching words get a suggestion.
TECHNICAL_TERMS = (
    "assay", "biomarker", "pharmacokinetics", "pharmacodynamics",
    "chromatography", "spectroscopy", "immunoassay", "cytometry",
    "genomics", "proteomics", "metabolomics", "bioinformatics",
    "microarray", "sequencing", "electrophoresis", "centrifugation",
)

# (pattern, correct form, description)
STYLE_RULES: Tuple[Tuple[re.Pattern, str, str], ...] = (
    (re.compile(r"\b(?:IC|ic|Ic)\s*50\b"), "IC50", 'Incorrect formatting of "IC50"'),
    (re.compile(r"\b(?:p\s*value|P\s*value|p\s*Value)\b"), "p-value", 'Incorrect formatting of "p-value"'),
    (re.compile(r"\bet\s*al\b(?!\.)"), "et al.", 'Incorrect formatting of "et al."'),
    (re.compile(r"in-vitro|invitro|InVitro"), "in vitro", 'Incorrect formatting of "in vitro"'),
    (re.compile(r"in-vivo|invivo|InVivo"), "in vivo", 'Incorrect formatting of "in vivo"'),
)

_REPEATED_SPACE = re.compile(r"[ \t]{2,}")
_LOWERCASE_SENTENCE = re.compile(r"(?:^|(?<=[.!?])\s+)([a-z][^.!?]*[.!?])")
_WORD = re.compile(r"[A-Za-z][A-Za-z'-]*[A-Za-z]|[A-Za-z]")


def closest_term(word: str, vocabulary=TECHNICAL_TERMS) -> Optional[str]:
    """Closest vocabulary entry within a length-scaled edit distance, if any."""
    lowered = word.lower()
    max_distance = max(1, len(lowered) // 6)
    best: Optional[str] = None
    best_distance = max_distance + 1
    for term in vocabulary:
        if abs(len(term) - len(lowered)) > max_distance:
            continue
        distance = Levenshtein.distance(lowered, term)
        if distance < best_distance:
            best, best_distance = term, distance
    return best


def _common_prefix(a: str, b: str) -> int:
    length = 0
    for ca, cb in zip(a, b):
        if ca != cb:
            break
        length += 1
    return length


def _match_case(suggestion: str, original: str) -> str:
    if original[:1].isupper():
        return suggestion[:1].upper() + suggestion[1:]
    return suggestion


class RuleBasedTextIssueProvider(TextIssueProvider):
    """Deterministic pattern checks; also the fallback for other providers."""

    name = "rules"

    async def provide_text_issues(self, text: str) -> List[RawTextIssue]:
        return self.find_issues(text)

    def find_issues(self, text: str) -> List[RawTextIssue]:
        issues: List[RawTextIssue] = []
        issues.extend(self._check_whitespace(text))
        issues.extend(self._check_sentence_case(text))
        issues.extend(self._check_style(text))
        issues.extend(self._check_spelling(text))
        logger.debug(f"Rule-based analysis found {len(issues)} issues")
        return issues

    def _check_whitespace(self, text: str) -> List[RawTextIssue]:
        # only spaces and tabs; newlines are layout, not typos
        return [
            RawTextIssue(
                type=TextIssueType.GRAMMAR,
                description="Double spaces detected",
                start=m.start(),
                end=m.end(),
                suggestion=" ",
            )
            for m in _REPEATED_SPACE.finditer(text)
        ]

    def _check_sentence_case(self, text: str) -> List[RawTextIssue]:
        issues = []
        for m in _LOWERCASE_SENTENCE.finditer(text):
            sentence = m.group(1)
            issues.append(RawTextIssue(
                type=TextIssueType.GRAMMAR,
                description="Sentence should start with a capital letter",
                start=m.start(1),
                end=m.end(1),
                suggestion=sentence[0].upper() + sentence[1:],
            ))
        return issues

    def _check_style(self, text: str) -> List[RawTextIssue]:
        issues = []
        for pattern, correct, description in STYLE_RULES:
            for m in pattern.finditer(text):
                if m.group(0) == correct:
                    continue
                issues.append(RawTextIssue(
                    type=TextIssueType.STYLE,
                    description=f'{description}. Use "{correct}" instead of "{m.group(0)}"',
                    start=m.start(),
                    end=m.end(),
                    suggestion=correct,
                ))
        return issues

    def _check_spelling(self, text: str) -> List[RawTextIssue]:
        issues = []
        for m in _WORD.finditer(text):
            word = m.group(0)
            lowered = word.lower()

            correction = COMMON_MISSPELLINGS.get(lowered)
            if correction is None and len(lowered) >= 6 and lowered not in TECHNICAL_TERMS:
                term = closest_term(lowered)
                # inflections of a known term ("genomic", "spectroscopic") share its stem
                if term and _common_prefix(term, lowered) < len(term) - 2:
                    correction = term

            if correction is None:
                continue

            issues.append(RawTextIssue(
                type=TextIssueType.SPELLING,
                description=f'"{word}" is misspelled',
                start=m.start(),
                end=m.end(),
                suggestion=_match_case(correction, word),
            ))
        return issues
