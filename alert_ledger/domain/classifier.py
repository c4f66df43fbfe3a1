"""Alert classification engine - decides credit vs debit vs unconfirmed"""

import re
from functools import lru_cache
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from alert_ledger.domain.models import ClassificationDecision, DecisionOutcome, Profile


@dataclass(frozen=True)
class ClassifierConfig:
    """
    Keyword lists and name-relation templates used by the classifier.

    Templates contain a single "{name}" placeholder which is replaced by the
    escaped profile name. Keyword checks are case-insensitive substring tests,
    except critical debit terms which must match as whole words.
    """

    critical_debit_terms: Tuple[str, ...] = ("debit", "dr")
    debit_keywords: Tuple[str, ...] = (
        "debited",
        "withdrawal",
        "withdraw",
        "transferred",
        "transfer from your",
        "payment to",
        "paid to",
        "sent to",
        "deducted",
        "charged",
        "purchase",
        "atm withdrawal",
        "pos purchase",
        "bill payment",
    )
    credit_keywords: Tuple[str, ...] = (
        "credited",
        "credit",
        "received",
        "deposit",
        "transfer from",
        "payment from",
        "salary",
        "refund",
        "reversal",
    )
    receiver_templates: Tuple[str, ...] = (
        r"\bto\s+{name}",
        r"\bcredited\s+to\s+{name}",
        r"\bbeneficiary[:\s]+{name}",
        r"\breceiver[:\s]+{name}",
        r"\brecipient[:\s]+{name}",
        r"\bpayment\s+to\s+{name}",
    )
    sender_templates: Tuple[str, ...] = (
        r"\bfrom\s+{name}",
        r"\bsender[:\s]+{name}",
        r"\bby\s+{name}",
        r"\btransfer\s+from\s+{name}",
    )


DEFAULT_CLASSIFIER_CONFIG = ClassifierConfig()


@dataclass(frozen=True)
class AlertRule:
    """Single classification rule: fires when predicate returns a reason"""

    name: str
    outcome: DecisionOutcome
    check: Callable[[str, Optional[Profile]], Optional[str]]


def _profile_name(profile: Optional[Profile]) -> Optional[str]:
    if profile is None or not profile.is_set:
        return None
    return profile.display_name.strip()


@lru_cache(maxsize=128)
def build_name_patterns(templates: Tuple[str, ...], name: str) -> Tuple[re.Pattern, ...]:
    """Compile relation templates for a user-supplied name, treated as a literal"""
    escaped = re.escape(name)
    # name must end on a word boundary; (?!\w) also works for names ending in punctuation
    return tuple(
        re.compile(template.format(name=escaped) + r"(?!\w)", re.IGNORECASE)
        for template in templates
    )


def _first_substring(text: str, keywords: Tuple[str, ...]) -> Optional[str]:
    lower = text.lower()
    for keyword in keywords:
        if keyword.lower() in lower:
            return keyword
    return None


@lru_cache(maxsize=16)
def build_rules(config: ClassifierConfig = DEFAULT_CLASSIFIER_CONFIG) -> Tuple[AlertRule, ...]:
    """
    Build the ordered rule list. First rule returning a reason wins. Built once per config.

    Order:
    1. empty text                  -> rejected_ambiguous
    2. user named as receiver      -> accepted (overrides any debit wording)
    3. critical debit term         -> rejected_debit
    4. user named as sender        -> rejected_debit
    5. debit keyword               -> rejected_debit
    6. no credit keyword           -> rejected_ambiguous
    7. otherwise                   -> accepted
    """
    critical = [
        (term, re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE))
        for term in config.critical_debit_terms
    ]

    def empty_text(text: str, profile: Optional[Profile]) -> Optional[str]:
        if not text or not text.strip():
            return "no text provided"
        return None

    def name_relation(templates: Tuple[str, ...], reason: str):
        def check(text: str, profile: Optional[Profile]) -> Optional[str]:
            name = _profile_name(profile)
            if name is None:
                return None
            if any(p.search(text) for p in build_name_patterns(templates, name)):
                return reason
            return None

        return check

    def critical_debit(text: str, profile: Optional[Profile]) -> Optional[str]:
        for term, pattern in critical:
            if pattern.search(text):
                return f"critical debit term '{term}' found"
        return None

    def debit_keyword(text: str, profile: Optional[Profile]) -> Optional[str]:
        keyword = _first_substring(text, config.debit_keywords)
        if keyword:
            return f"debit keyword '{keyword}' found"
        return None

    def missing_credit(text: str, profile: Optional[Profile]) -> Optional[str]:
        if _first_substring(text, config.credit_keywords) is None:
            return "cannot confirm credit"
        return None

    def credit_confirmed(text: str, profile: Optional[Profile]) -> Optional[str]:
        return "credit confirmed"

    return (
        AlertRule("empty_text", DecisionOutcome.REJECTED_AMBIGUOUS, empty_text),
        AlertRule(
            "receiver_name",
            DecisionOutcome.ACCEPTED,
            name_relation(config.receiver_templates, "user named as receiver"),
        ),
        AlertRule("critical_debit_term", DecisionOutcome.REJECTED_DEBIT, critical_debit),
        AlertRule(
            "sender_name",
            DecisionOutcome.REJECTED_DEBIT,
            name_relation(config.sender_templates, "user named as sender"),
        ),
        AlertRule("debit_keyword", DecisionOutcome.REJECTED_DEBIT, debit_keyword),
        AlertRule("no_credit_keyword", DecisionOutcome.REJECTED_AMBIGUOUS, missing_credit),
        AlertRule("credit_keyword", DecisionOutcome.ACCEPTED, credit_confirmed),
    )


def classify(
    text: str,
    profile: Optional[Profile] = None,
    config: ClassifierConfig = DEFAULT_CLASSIFIER_CONFIG,
) -> ClassificationDecision:
    """
    Main entry point: classify a raw alert.

    Returns the decision of the first rule that fires. The final rule always
    fires, so every input gets a decision.
    """
    for rule in build_rules(config):
        reason = rule.check(text, profile)
        if reason is not None:
            return ClassificationDecision(outcome=rule.outcome, rule=rule.name, reason=reason)

    return ClassificationDecision(
        outcome=DecisionOutcome.REJECTED_AMBIGUOUS,
        rule="no_rule",
        reason="cannot confirm credit",
    )
