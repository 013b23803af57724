#!/usr/bin/env python3
"""
Signal Registry - The named signals a WeightProfile can weight.

Each entry binds a signal family (date, set, numeric, string, text, bipartite)
to the actor fields it reads. The field list also drives the content hash used
by the similarity cache, so a signal is invalidated only when its own fields
change.
"""

from typing import Dict, Union

from matchmaking.models import ActorProfile
from matchmaking.signals.base import (
    DirectionalSignal, SignalContext, SignalOutcome, SymmetricSignal
)
from matchmaking.signals.bipartite import capability_need_overlap, matched_needs
from matchmaking.signals.numeric import numeric_log_proximity
from matchmaking.signals.sets import list_jaccard, shared_labels
from matchmaking.signals.strings import levenshtein_similarity
from matchmaking.signals.temporal import date_proximity
from matchmaking.signals.text import row_cosine

Signal = Union[SymmetricSignal, DirectionalSignal]


def _jaccard(name: str, field: str) -> SymmetricSignal:
    def compute(a: ActorProfile, b: ActorProfile, ctx: SignalContext) -> SignalOutcome:
        ctx.budget.check(name)
        set_a, set_b = getattr(a, field), getattr(b, field)
        if not set_a or not set_b:
            return SignalOutcome.excluded()
        return SignalOutcome(
            score=list_jaccard(set_a, set_b),
            included=True,
            detail={'shared': shared_labels(set_a, set_b)},
        )
    return SymmetricSignal(name=name, family="list_jaccard", fields=(field,), compute=compute)


def _numeric(name: str, field: str) -> SymmetricSignal:
    def compute(a: ActorProfile, b: ActorProfile, ctx: SignalContext) -> SignalOutcome:
        ctx.budget.check(name)
        value_a, value_b = getattr(a, field), getattr(b, field)
        score = numeric_log_proximity(value_a, value_b)
        if score is None:
            return SignalOutcome.excluded()
        return SignalOutcome(score=score, included=True, detail={'values': sorted([value_a, value_b])})
    return SymmetricSignal(name=name, family="numeric_zexp", fields=(field,), compute=compute)


def _founding_date(a: ActorProfile, b: ActorProfile, ctx: SignalContext) -> SignalOutcome:
    ctx.budget.check("founding_date_proximity")
    score = date_proximity(a.founded, b.founded, ctx.date_decay_days)
    if score is None:
        return SignalOutcome.excluded()
    return SignalOutcome(
        score=score,
        included=True,
        detail={
            'days_apart': abs((a.founded - b.founded).days),
            'years': sorted([a.founded.year, b.founded.year]),
        },
    )


def _name(a: ActorProfile, b: ActorProfile, ctx: SignalContext) -> SignalOutcome:
    ctx.budget.check("name_similarity")
    score = levenshtein_similarity(a.name, b.name, check=lambda: ctx.budget.check("name_similarity"))
    if score is None:
        return SignalOutcome.excluded()
    return SignalOutcome(score=score, included=True)


def _pitch(a: ActorProfile, b: ActorProfile, ctx: SignalContext) -> SignalOutcome:
    ctx.budget.check("pitch_similarity")
    if ctx.corpus is None:
        return SignalOutcome.excluded("no_corpus")
    vectors = ctx.text_vectors
    if vectors is not None and a.id in vectors and b.id in vectors:
        score = row_cosine(vectors.get(a.id), vectors.get(b.id))
    else:
        score = ctx.corpus.similarity(a.text, b.text)
    if score is None:
        return SignalOutcome.excluded()
    return SignalOutcome(score=score, included=True)


def _capability_need(offering: ActorProfile, seeking: ActorProfile, ctx: SignalContext) -> SignalOutcome:
    ctx.budget.check("capability_need_fit")
    score = capability_need_overlap(offering.capabilities, seeking.needs)
    if score is None:
        return SignalOutcome.excluded()
    return SignalOutcome(
        score=score,
        included=True,
        detail={'matches': matched_needs(offering.capabilities, seeking.needs)},
    )


def _corpus_scope(ctx: SignalContext) -> str:
    return ctx.corpus.fingerprint if ctx.corpus is not None else ""


def _decay_scope(ctx: SignalContext) -> str:
    return f"tau={ctx.date_decay_days:g}"


SIGNALS: Dict[str, Signal] = {
    signal.name: signal
    for signal in (
        SymmetricSignal(
            name="founding_date_proximity", family="date_proximity",
            fields=("founded",), compute=_founding_date, scope=_decay_scope,
        ),
        _jaccard("industry_alignment", "industries"),
        _jaccard("platform_alignment", "platforms"),
        _jaccard("market_alignment", "markets"),
        _jaccard("technology_alignment", "technologies"),
        _numeric("revenue_proximity", "revenue"),
        _numeric("employee_count_proximity", "employee_count"),
        _numeric("funding_proximity", "last_funding_amount"),
        SymmetricSignal(
            name="name_similarity", family="string_levenshtein",
            fields=("name",), compute=_name,
        ),
        SymmetricSignal(
            name="pitch_similarity", family="text_tfidf_cosine",
            fields=("pitch", "looking_for"), compute=_pitch, scope=_corpus_scope,
        ),
        DirectionalSignal(
            name="capability_need_fit", family="bipartite_capability_need",
            fields=("capabilities", "needs"), compute_direction=_capability_need,
        ),
    )
}

SIGNAL_NAMES = tuple(SIGNALS.keys())


def get_signal(name: str) -> Signal:
    return SIGNALS[name]
