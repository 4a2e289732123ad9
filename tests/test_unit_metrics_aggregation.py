import math

import pytest

from kol_tracker.models.db.enums import MutationKind, SocialPlatform
from kol_tracker.services.metrics_aggregation import (
    apply_document_mutation,
    apply_entity_delete,
    apply_entity_upsert,
    apply_platform_replace,
    apply_post_mutation,
    compute_entity_metrics,
    compute_roster_metrics,
    cpm_by_entity,
    with_metrics,
)


def test_two_posts_blended_cpm(make_kol, make_post):
    kol = make_kol(1, posts=[make_post(100000, 1000), make_post(50000, 500)])
    m = compute_entity_metrics(kol)
    assert m.total_impressions == 150000
    assert m.total_cost == 1500
    assert m.num_posts == 2
    assert m.average_cpm == pytest.approx(10.0)


def test_no_posts_means_zero_cpm(make_kol, make_link):
    m = compute_entity_metrics(make_kol(1, platforms=[make_link("youtube", 5000)]))
    assert m.total_followers == 5000
    assert m.num_posts == 0
    assert m.total_cost == 0
    assert m.average_cpm == 0


def test_cost_without_impressions_has_zero_cpm(make_kol, make_post):
    m = compute_entity_metrics(make_kol(1, posts=[make_post(0, 300)]))
    assert m.total_cost == 300
    assert m.average_cpm == 0


def test_cpm_is_blended_not_mean_of_posts(make_kol, make_post):
    # Per-post CPMs are 10 and 1; their mean (5.5) must not be reported
    kol = make_kol(1, posts=[make_post(1000, 10), make_post(100000, 100)])
    m = compute_entity_metrics(kol)
    assert m.average_cpm == pytest.approx(110 / 101000 * 1000)
    assert m.average_cpm != pytest.approx(5.5)


def test_post_order_does_not_change_metrics(make_kol, make_post):
    posts = [make_post(1200, 30), make_post(800, None), make_post(45000, 900.5)]
    forward = compute_entity_metrics(make_kol(1, posts=posts))
    backward = compute_entity_metrics(make_kol(1, posts=list(reversed(posts))))
    assert forward == backward


def test_missing_cost_counts_as_zero(make_kol, make_post):
    m = compute_entity_metrics(make_kol(1, posts=[make_post(10000, None), make_post(10000, 200)]))
    assert m.total_cost == 200
    assert m.average_cpm == pytest.approx(10.0)


def test_malformed_numbers_normalize_to_zero(make_kol, make_post, make_link):
    kol = make_kol(
        1,
        platforms=[make_link("youtube", -100), make_link("tiktok", math.nan), make_link("twitter", 2500)],
        posts=[
            make_post(math.nan, -50),
            make_post(-10, math.inf),
            make_post(None, "abc"),
            make_post(4000, 40),
        ],
    )
    m = compute_entity_metrics(kol)
    assert m.total_followers == 2500
    assert m.total_impressions == 4000
    assert m.total_cost == 40
    assert m.num_posts == 4
    assert m.average_cpm == pytest.approx(10.0)


def test_compute_is_idempotent(make_kol, make_post, make_link):
    kol = make_kol(1, platforms=[make_link("youtube", 100)], posts=[make_post(5000, 25)])
    assert compute_entity_metrics(kol) == compute_entity_metrics(kol)
    once = with_metrics(kol)
    assert with_metrics(once).metrics == once.metrics


def test_budget_split_by_follower_share(make_kol, make_post, make_link):
    kol = make_kol(
        1,
        platforms=[make_link("youtube", 80000), make_link("tiktok", 20000)],
        posts=[make_post(50000, 1000)],
    )
    budget = {b.platform: b.amount for b in compute_roster_metrics([kol]).budget_by_platform}
    assert budget[SocialPlatform.YOUTUBE] == pytest.approx(800)
    assert budget[SocialPlatform.TIKTOK] == pytest.approx(200)


def test_budget_sums_to_spend_when_everyone_has_followers(make_kol, make_post, make_link):
    roster = [
        make_kol(1, platforms=[make_link("youtube", 3), make_link("twitter", 7)], posts=[make_post(1000, 333.33)]),
        make_kol(2, platforms=[make_link("twitter", 1)], posts=[make_post(500, 17)]),
        make_kol(3, platforms=[make_link("instagram", 10)]),
    ]
    rm = compute_roster_metrics(roster)
    assert sum(b.amount for b in rm.budget_by_platform) == pytest.approx(rm.total_spend)


def test_zero_follower_entity_contributes_no_budget(make_kol, make_post, make_link):
    kol = make_kol(1, platforms=[make_link("youtube", 0)], posts=[make_post(1000, 500)])
    rm = compute_roster_metrics([kol])
    assert rm.total_spend == 500
    assert rm.budget_by_platform == ()


def test_zero_entity_leaves_roster_cpm_unchanged(make_kol, make_post):
    base = [make_kol(1, posts=[make_post(20000, 100)])]
    before = compute_roster_metrics(base).average_cpm
    after = compute_roster_metrics(base + [make_kol(2)]).average_cpm
    assert after == before


def test_roster_with_only_zero_impressions(make_kol, make_post):
    rm = compute_roster_metrics([make_kol(1, posts=[make_post(0, 0)])])
    assert rm.average_cpm == 0
    assert rm.top_performers == ()


def test_empty_roster():
    rm = compute_roster_metrics([])
    assert rm.total_kols == 0
    assert rm.total_spend == 0
    assert rm.average_cpm == 0
    assert rm.budget_by_platform == ()
    assert rm.top_performers == ()


def test_roster_totals(make_kol, make_post, make_link):
    roster = [
        make_kol(1, platforms=[make_link("youtube", 1000)], posts=[make_post(10000, 100), make_post(30000, 300)]),
        make_kol(2, platforms=[make_link("tiktok", 500), make_link("twitter", 250)], posts=[make_post(60000, 200)]),
    ]
    rm = compute_roster_metrics(roster)
    assert rm.total_kols == 2
    assert rm.total_posts == 3
    assert rm.total_impressions == 100000
    assert rm.total_spend == 600
    assert rm.total_followers_reach == 1750
    assert rm.average_cpm == pytest.approx(6.0)


def test_top_performers_ascending_and_limited(make_kol, make_post):
    roster = [
        make_kol(1, posts=[make_post(1000, 50)]),     # 50
        make_kol(2, posts=[make_post(1000, 5)]),      # 5
        make_kol(3, posts=[make_post(1000, 20)]),     # 20
        make_kol(4, posts=[make_post(0, 500)]),       # cost but no reach
        make_kol(5, posts=[make_post(1000, None)]),   # reach but no cost
    ]
    top = compute_roster_metrics(roster, top_n=2).top_performers
    assert [t.kol_id for t in top] == [2, 3]

    everyone = compute_roster_metrics(roster, top_n=10).top_performers
    assert [t.kol_id for t in everyone] == [2, 3, 1]


def test_top_performers_default_limit(monkeypatch, make_kol, make_post):
    from kol_tracker.config import METRICS_SETTINGS

    monkeypatch.setitem(METRICS_SETTINGS, "top_performers_limit", 1)
    roster = [make_kol(i, posts=[make_post(1000, i)]) for i in range(1, 4)]
    top = compute_roster_metrics(roster).top_performers
    assert [t.kol_id for t in top] == [1]


def test_cpm_by_entity_skips_zero_and_sorts(make_kol, make_post):
    roster = [
        make_kol(1, posts=[make_post(1000, 30)]),
        make_kol(2),
        make_kol(3, posts=[make_post(1000, 10)]),
    ]
    series = cpm_by_entity(roster)
    assert [e.kol_id for e in series] == [3, 1]
    assert series[0].average_cpm == pytest.approx(10.0)



def test_equal_cpm_keeps_roster_order(make_kol, make_post):
    roster = [
        make_kol(7, posts=[make_post(1000, 10)]),
        make_kol(2, posts=[make_post(2000, 20)]),
        make_kol(9, posts=[make_post(1000, 4)]),
        make_kol(5, posts=[make_post(500, 5)]),
    ]
    top = compute_roster_metrics(roster, top_n=10).top_performers
    assert [t.kol_id for t in top] == [9, 7, 2, 5]

    series = cpm_by_entity(roster)
    assert [e.kol_id for e in series] == [9, 7, 2, 5]

    reversed_top = compute_roster_metrics(roster[::-1], top_n=10).top_performers
    assert [t.kol_id for t in reversed_top] == [9, 5, 2, 7]


# ------------------------------ Mutations --------------------------------- #

def test_add_post_recomputes_metrics(make_kol, make_post):
    roster = (with_metrics(make_kol(1, posts=[make_post(10000, 100, post_id=1)])),)
    roster = apply_post_mutation(roster, 1, MutationKind.ADD, make_post(10000, 300, post_id=2))
    assert roster[0].num_posts == 2
    assert roster[0].total_cost == 400
    assert roster[0].average_cpm == pytest.approx(20.0)


def test_update_post_replaces_by_id(make_kol, make_post):
    roster = (with_metrics(make_kol(1, posts=[make_post(10000, 100, post_id=7)])),)
    roster = apply_post_mutation(roster, 1, "update", make_post(20000, 100, post_id=7))
    assert roster[0].num_posts == 1
    assert roster[0].total_impressions == 20000
    assert roster[0].average_cpm == pytest.approx(5.0)


def test_delete_only_post_zeroes_metrics(make_kol, make_post):
    roster = (with_metrics(make_kol(1, posts=[make_post(10000, 500, post_id=3)])),)
    roster = apply_post_mutation(roster, 1, MutationKind.DELETE, 3)
    m = roster[0].metrics
    assert (m.total_cost, m.total_impressions, m.num_posts, m.average_cpm) == (0, 0, 0, 0)


def test_post_mutation_unknown_ids_are_noops(make_kol, make_post):
    roster = (with_metrics(make_kol(1, posts=[make_post(10000, 100, post_id=1)])),)
    assert apply_post_mutation(roster, 99, MutationKind.ADD, make_post(1, 1)) == roster
    assert apply_post_mutation(roster, 1, MutationKind.UPDATE, make_post(5, 5, post_id=42)) == roster
    assert apply_post_mutation(roster, 1, MutationKind.DELETE, 42) == roster


def test_post_mutation_leaves_other_entities_untouched(make_kol, make_post):
    first = with_metrics(make_kol(1))
    second = with_metrics(make_kol(2))
    roster = apply_post_mutation((first, second), 2, MutationKind.ADD, make_post(1000, 10, kol_id=2))
    assert roster[0] is first
    assert roster[1] is not second
    assert second.num_posts == 0


def test_platform_replace_drops_old_links(make_kol, make_link):
    roster = (with_metrics(make_kol(1, platforms=[make_link("youtube", 1000), make_link("tiktok", 500)])),)
    roster = apply_platform_replace(roster, 1, [make_link("youtube", 42)])
    assert [(p.platform, p.follower_count) for p in roster[0].platforms] == [(SocialPlatform.YOUTUBE, 42)]
    assert roster[0].total_followers == 42


def test_platform_replace_with_empty_set(make_kol, make_link):
    roster = (with_metrics(make_kol(1, platforms=[make_link("youtube", 1000)])),)
    roster = apply_platform_replace(roster, 1, [])
    assert roster[0].platforms == ()
    assert roster[0].total_followers == 0


def test_document_update_is_rejected(make_kol, make_document):
    roster = (with_metrics(make_kol(1)),)
    with pytest.raises(ValueError):
        apply_document_mutation(roster, 1, MutationKind.UPDATE, make_document())


def test_document_mutations_keep_metrics(make_kol, make_post, make_document):
    kol = with_metrics(make_kol(1, posts=[make_post(1000, 10)]))
    doc = make_document("Invoice_March.pdf")
    roster = apply_document_mutation((kol,), 1, MutationKind.ADD, doc)
    assert roster[0].documents == (doc,)
    assert roster[0].metrics is kol.metrics

    roster = apply_document_mutation(roster, 1, MutationKind.DELETE, doc.id)
    assert roster[0].documents == ()
    assert roster[0].metrics is kol.metrics


def test_upsert_prepends_new_entity(make_kol):
    roster = (with_metrics(make_kol(1)),)
    roster = apply_entity_upsert(roster, make_kol(2))
    assert [k.id for k in roster] == [2, 1]


def test_upsert_replaces_in_place_with_fresh_metrics(make_kol, make_post):
    roster = (with_metrics(make_kol(1)), with_metrics(make_kol(2)), with_metrics(make_kol(3)))
    roster = apply_entity_upsert(roster, make_kol(2, name="Renamed", posts=[make_post(2000, 10, kol_id=2)]))
    assert [k.id for k in roster] == [1, 2, 3]
    assert roster[1].name == "Renamed"
    assert roster[1].average_cpm == pytest.approx(5.0)


def test_entity_delete(make_kol):
    roster = (with_metrics(make_kol(1)), with_metrics(make_kol(2)))
    assert [k.id for k in apply_entity_delete(roster, 1)] == [2]
    assert apply_entity_delete(roster, 99) == roster


def test_inputs_are_not_mutated(make_kol, make_post):
    kol = with_metrics(make_kol(1, posts=[make_post(1000, 10, post_id=1)]))
    roster = (kol,)
    apply_post_mutation(roster, 1, MutationKind.DELETE, 1)
    assert roster[0] is kol
    assert kol.num_posts == 1
