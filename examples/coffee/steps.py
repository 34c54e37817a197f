"""Step definitions for the coffee machine example.

This file is loaded with :func:`stepwright.load_definitions`, which injects
the ``steps`` handle. Every definition receives the scenario context first,
followed by the captured groups of its pattern.
"""
# ruff: noqa: F821

from stepwright import pending

steps.Given(
    r'^I have ordered hot "([^"]*)"$',
    lambda world, drink: setattr(world, "order", drink),
)


@steps.Given(r"^there (?:is|are) (\d+) coins? inserted$")
def insert_coins(world, coins):
    world.coins = int(coins)


@steps.When(r"^I press the button$")
def press_button(world):
    if world.get("coins", 0) < 1:
        msg = "insert a coin first"
        raise AssertionError(msg)
    world.cup = world.order


@steps.Then(r'^I should be served a "([^"]*)"$')
def served(world, drink):
    assert world.cup == drink, f"expected {drink!r}, got {world.cup!r}"


@steps.Then(r"^I should get my change$")
def change(world):
    pending("change handling is not implemented")
