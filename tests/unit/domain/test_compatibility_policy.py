"""Tests for the compatibility filter."""

from orderdesk.domain.entities.agent import Agent
from orderdesk.domain.entities.product import Product
from orderdesk.domain.policies.compatibility import agent_satisfies, eligible_agents


def _agent(aid: int, **kwargs) -> Agent:
    return Agent(id=aid, name=f"A{aid}", **kwargs)


def _product(pid: int, assigned=(), hidden=()) -> Product:
    return Product(
        id=pid, external_id=str(pid * 100), title=f"P{pid}",
        assigned_agent_ids=set(assigned), hidden_for_agent_ids=set(hidden),
    )


ROSTER = [_agent(1), _agent(2), _agent(3)]


def test_no_products_everyone_eligible():
    assert [a.id for a in eligible_agents([], ROSTER)] == [1, 2, 3]


def test_unrestricted_product_everyone_eligible():
    assert [a.id for a in eligible_agents([_product(1)], ROSTER)] == [1, 2, 3]


def test_specialized_product_limits_to_whitelist():
    result = eligible_agents([_product(1, assigned={2})], ROSTER)
    assert [a.id for a in result] == [2]


def test_hidden_agent_excluded():
    result = eligible_agents([_product(1, hidden={1, 3})], ROSTER)
    assert [a.id for a in result] == [2]


def test_hidden_beats_whitelist():
    result = eligible_agents([_product(1, assigned={1, 2}, hidden={1})], ROSTER)
    assert [a.id for a in result] == [2]


def test_two_specialized_products_intersect():
    products = [_product(1, assigned={1, 2}), _product(2, assigned={2, 3})]
    assert [a.id for a in eligible_agents(products, ROSTER)] == [2]


def test_disjoint_whitelists_leave_nobody():
    products = [_product(1, assigned={1}), _product(2, assigned={3})]
    assert eligible_agents(products, ROSTER) == []


def test_hidden_on_unspecialized_product_combined_with_specialized():
    products = [_product(1, assigned={1, 2}), _product(2, hidden={2})]
    assert [a.id for a in eligible_agents(products, ROSTER)] == [1]


def test_inactive_and_unsaved_agents_skipped():
    roster = [_agent(1, is_active=False), _agent(2, can_view_orders=False), Agent(id=None, name="new"), _agent(4)]
    assert [a.id for a in eligible_agents([], roster)] == [4]


def test_roster_order_preserved():
    roster = [_agent(3), _agent(1), _agent(2)]
    assert [a.id for a in eligible_agents([], roster)] == [3, 1, 2]


def test_agent_satisfies_direct():
    assert agent_satisfies(5, [_product(1, assigned={5})])
    assert not agent_satisfies(6, [_product(1, assigned={5})])
