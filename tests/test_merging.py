from cafe_pos.models import OrderItemType
from cafe_pos.order_items import LineNode, VariationNode, is_order_item_meta_equal, merge_line, merge_variations

PIZZA, DRINK, MENU, SPECIAL = 1, 2, 10, 11
LARGE, HALF_LITER, CHEESE = 100, 101, 102


def variation(ids, count, id=None):
    return VariationNode.build(ids, count, id=id)


def line(product_id=PIZZA, count=1, discount=0, variations=(), children=(), line_type=OrderItemType.PRODUCT, id=None):
    return LineNode(
        type=line_type,
        count=count,
        product_id=product_id,
        discount=discount,
        variations=tuple(variations),
        children=tuple(children),
        id=id,
    )


def test_merge_sums_count_and_discount():
    merged = merge_line(line(count=2, discount=100), line(count=3, discount=50))

    assert merged.count == 5
    assert merged.discount == 150


def test_merging_twice_equals_merging_the_summed_count():
    existing = line(count=1, variations=[variation([LARGE], 1, id=1)])
    incoming = line(count=2, variations=[variation([LARGE], 2)])

    twice = merge_line(merge_line(existing, incoming), incoming)
    once = merge_line(existing, line(count=4, variations=[variation([LARGE], 4)]))

    assert twice == once
    assert twice.count == 5
    assert twice.variations == (variation([LARGE], 5, id=1),)


def test_equal_variation_sets_accumulate_instead_of_duplicating():
    existing = [variation([LARGE, CHEESE], 2, id=7)]

    merged = merge_variations(existing, [variation([CHEESE, LARGE], 1), variation([HALF_LITER], 1)])

    assert merged == (variation([LARGE, CHEESE], 3, id=7), variation([HALF_LITER], 1))


def test_new_variations_are_unpersisted():
    merged = merge_variations([], [variation([LARGE], 1, id=99), variation([LARGE], 2)])

    assert merged == (variation([LARGE], 3),)
    assert merged[0].id is None


def test_special_merges_its_single_child():
    existing = line(SPECIAL, 1, line_type=OrderItemType.SPECIAL, children=[
        line(PIZZA, 1, variations=[variation([LARGE], 1, id=3)], id=20),
    ])
    incoming = line(SPECIAL, 2, line_type=OrderItemType.SPECIAL, children=[
        line(PIZZA, 2, variations=[variation([LARGE], 1), variation([CHEESE], 1)]),
    ])

    merged = merge_line(existing, incoming)

    assert merged.count == 3
    (child,) = merged.children
    assert child.id == 20
    assert child.count == 3
    assert child.variations == (variation([LARGE], 2, id=3), variation([CHEESE], 1))


def test_menu_scenario_from_two_to_three_menus():
    existing = line(MENU, 2, line_type=OrderItemType.MENU, id=1, children=[
        line(PIZZA, 4, variations=[variation([LARGE], 4, id=11)], id=2),
        line(DRINK, 2, variations=[variation([HALF_LITER], 2, id=12)], id=3),
    ])
    incoming = line(MENU, 1, line_type=OrderItemType.MENU, children=[
        line(PIZZA, 2, variations=[variation([LARGE], 2)]),
        line(DRINK, 1, variations=[variation([HALF_LITER], 1)]),
    ])

    assert is_order_item_meta_equal(existing, incoming)
    merged = merge_line(existing, incoming)

    assert merged.count == 3
    pizza, drink = merged.children
    assert (pizza.id, pizza.count) == (2, 6)
    assert pizza.variations == (variation([LARGE], 6, id=11),)
    assert (drink.id, drink.count) == (3, 3)
    assert drink.variations == (variation([HALF_LITER], 3, id=12),)


def test_menu_children_keep_their_stored_order():
    existing = line(MENU, 1, line_type=OrderItemType.MENU, children=[line(PIZZA, 1, id=2), line(DRINK, 1, id=3)])
    incoming = line(MENU, 1, line_type=OrderItemType.MENU, children=[line(PIZZA, 1), line(DRINK, 1)])

    merged = merge_line(existing, incoming)

    assert [(c.id, c.product_id, c.count) for c in merged.children] == [(2, PIZZA, 2), (3, DRINK, 2)]


def test_merge_does_not_touch_the_existing_value():
    existing = line(count=1, variations=[variation([LARGE], 1, id=1)])

    merge_line(existing, line(count=5, variations=[variation([LARGE], 5)]))

    assert existing.count == 1
    assert existing.variations[0].count == 1


def test_menu_children_merge_into_the_matching_slot():
    existing = line(MENU, 2, line_type=OrderItemType.MENU, children=[
        line(PIZZA, 4, variations=[variation([LARGE], 4, id=11)], id=2),
        line(DRINK, 2, variations=[variation([HALF_LITER], 2, id=12)], id=3),
    ])
    incoming = line(MENU, 1, line_type=OrderItemType.MENU, children=[
        line(DRINK, 1, variations=[variation([HALF_LITER], 1)]),
        line(PIZZA, 2, variations=[variation([LARGE], 2)]),
    ])

    merged = merge_line(existing, incoming)

    pizza, drink = merged.children
    assert (pizza.id, pizza.product_id, pizza.count) == (2, PIZZA, 6)
    assert pizza.variations == (variation([LARGE], 6, id=11),)
    assert (drink.id, drink.product_id, drink.count) == (3, DRINK, 3)
    assert drink.variations == (variation([HALF_LITER], 3, id=12),)
