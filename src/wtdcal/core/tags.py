"""Tag registry - compiled-in rules for how tags are disclosed."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TagRule:
    """How a tag shows up on the public calendar."""

    public: bool = False
    label: str | None = None
    css_class: str | None = None


TAG_RULES: dict[str, TagRule] = {
    "public": TagRule(public=True),
    "busy": TagRule(
        label="I will be genuinely busy, e.g., a meeting with others.",
        css_class="tag-busy",
    ),
    "rough": TagRule(
        label=(
            "The nature of the event (e.g., a hike) makes it difficult to "
            "predict the exact start/end times."
        ),
        css_class="tag-rough",
    ),
    "tentative": TagRule(
        label="This event timing is only tentative.",
        css_class="tag-tentative",
    ),
    "join-me": TagRule(
        label=(
            "This is an open event; if you're interested in attending with me "
            "please reach out!"
        ),
        css_class="tag-join-me",
    ),
    "self": TagRule(
        label=(
            "This is scheduled time for me to complete a specific work or "
            "personal task; I can usually reschedule such blocks when requested."
        ),
        css_class="tag-self",
    ),
}


def rule_for(tag: str, rules: dict[str, TagRule] | None = None) -> TagRule | None:
    """Look up the rule for a tag, or None if the tag is unregistered."""
    rules = TAG_RULES if rules is None else rules
    return rules.get(tag)


def is_public(tags: frozenset[str] | set[str], rules: dict[str, TagRule] | None = None) -> bool:
    """True if any tag has a rule that discloses the description."""
    rules = TAG_RULES if rules is None else rules
    return any(rules[t].public for t in tags if t in rules)


def registered_tags(
    tags: frozenset[str] | set[str], rules: dict[str, TagRule] | None = None
) -> list[str]:
    """Tags that have a rule, sorted by name. Unregistered tags are private."""
    rules = TAG_RULES if rules is None else rules
    return sorted(t for t in tags if t in rules)
