"""Tech tree definitions for Imperium."""
from __future__ import annotations
from .types import TechId, GovernmentType, GOVERNMENTS

T = TechId

# tech -> (cost, prerequisites)
TECH_TREE: dict[TechId, tuple[int, tuple[TechId, ...]]] = {
    T.POTTERY:           (6, ()),
    T.WARRIOR_CODE:      (6, ()),
    T.ALPHABET:          (6, ()),
    T.CEREMONIAL_BURIAL: (6, ()),
    T.BRONZE_WORKING:    (8, ()),
    T.MASONRY:           (8, ()),
    T.HORSEBACK_RIDING:  (10, ()),
    T.THE_WHEEL:         (10, ()),
    T.MYSTICISM:         (6, (T.CEREMONIAL_BURIAL,)),
    T.POLYTHEISM:        (12, (T.CEREMONIAL_BURIAL,)),
    T.MONARCHY:          (18, (T.CEREMONIAL_BURIAL,)),
    T.IRON_WORKING:      (12, (T.BRONZE_WORKING,)),
    T.WRITING:           (12, (T.ALPHABET,)),
    T.MAP_MAKING:        (14, (T.ALPHABET,)),
    T.MATHEMATICS:       (12, (T.ALPHABET,)),
    T.CURRENCY:          (14, (T.BRONZE_WORKING,)),
    T.TRADE:             (14, (T.CURRENCY,)),
    T.CONSTRUCTION:      (16, (T.MASONRY, T.THE_WHEEL)),
    T.THE_REPUBLIC:      (16, (T.WRITING,)),
    T.LITERACY:          (16, (T.WRITING,)),
    T.SEAFARING:         (16, (T.MAP_MAKING, T.POTTERY)),
    T.FEUDALISM:         (18, (T.THE_REPUBLIC,)),
    T.MONOTHEISM:        (18, (T.MYSTICISM,)),
    T.CHIVALRY:          (20, (T.HORSEBACK_RIDING, T.FEUDALISM)),
    T.ASTRONOMY:         (20, (T.MYSTICISM, T.MATHEMATICS)),
    T.NAVIGATION:        (22, (T.MAP_MAKING, T.ASTRONOMY)),
    T.PHILOSOPHY:        (22, (T.MYSTICISM, T.LITERACY)),
    T.INVENTION:         (24, (T.CONSTRUCTION,)),
    T.UNIVERSITY:        (24, (T.MATHEMATICS, T.PHILOSOPHY)),
    T.GUNPOWDER:         (26, (T.INVENTION, T.IRON_WORKING)),
    T.COMMUNISM:         (30, (T.PHILOSOPHY, T.INVENTION)),
    T.DEMOCRACY:         (30, (T.PHILOSOPHY, T.LITERACY)),
}


def validate_tree(tree: dict[TechId, tuple[int, tuple[TechId, ...]]]) -> None:
    """Raise ValueError if a prerequisite is missing or the tree has a cycle."""
    for tech, (_, prereqs) in tree.items():
        for p in prereqs:
            if p not in tree:
                raise ValueError(f"{tech.value} requires unknown tech {p!r}")
    done: set[TechId] = set()
    visiting: set[TechId] = set()

    def visit(tech: TechId):
        if tech in done:
            return
        if tech in visiting:
            raise ValueError(f"Tech tree cycle through {tech.value}")
        visiting.add(tech)
        for p in tree[tech][1]:
            visit(p)
        visiting.discard(tech)
        done.add(tech)

    for tech in tree:
        visit(tech)


validate_tree(TECH_TREE)


def tech_cost(tech: TechId) -> int:
    return TECH_TREE[TechId(tech)][0]


def prerequisites(tech: TechId) -> tuple[TechId, ...]:
    return TECH_TREE[TechId(tech)][1]


def can_research(player_techs: set[TechId], tech: TechId) -> bool:
    """Check whether prerequisites are met and the tech is not yet known."""
    if tech in player_techs:
        return False
    return all(p in player_techs for p in prerequisites(tech))


def available_techs(player_techs: set[TechId]) -> list[TechId]:
    """Return techs researchable next, in table order."""
    return [t for t in TECH_TREE if can_research(player_techs, t)]


def available_governments(player_techs: set[TechId]) -> list[GovernmentType]:
    return [g for g, stats in GOVERNMENTS.items()
            if g != GovernmentType.ANARCHY and (stats.tech is None or stats.tech in player_techs)]
