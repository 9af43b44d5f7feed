from revcatgpt.context.budget import take_within_budget
from revcatgpt.context.tokens import estimate_tokens, num_tokens_from_messages


def test_all_fragments_under_budget():
    items = list(take_within_budget(["aa", "bbb", "c"], 100, len))

    assert [i.text for i in items] == ["aa", "bbb", "c"]
    assert [i.total for i in items] == [2, 5, 6]


def test_stops_after_first_fragment_over_budget():
    items = list(take_within_budget(["x" * 4, "y" * 4, "z" * 4], 6, len))

    # Second fragment pushes the total to 8 > 6: kept in full, then stop
    assert [i.text for i in items] == ["xxxx", "yyyy"]
    assert items[-1].total == 8


def test_exactly_at_budget_continues():
    items = list(take_within_budget(["xx", "yy", "zz"], 4, len))
    assert [i.text for i in items] == ["xx", "yy", "zz"]


def test_totals_are_monotonic():
    items = list(take_within_budget(["a", "", "bbb", "cc"], 1000, len))
    totals = [i.total for i in items]
    assert totals == sorted(totals)


def test_does_not_pull_fragments_past_the_stop():
    pulled = []

    def fragments():
        for text in ("first", "second", "third"):
            pulled.append(text)
            yield text

    list(take_within_budget(fragments(), 3, len))
    assert pulled == ["first"]


def test_estimate_counts_message_overhead():
    # 3 per message + 3 reply priming
    assert estimate_tokens("", "gpt-4-0314") == 6
    # "hello world" is two cl100k tokens
    assert estimate_tokens("hello world", "gpt-4-0314") == 8


def test_num_tokens_counts_role_and_name():
    messages = [{"role": "user", "content": "hello world", "name": "bob"}]
    with_name = num_tokens_from_messages(messages, "gpt-4-0314")
    without_name = num_tokens_from_messages(
        [{"role": "user", "content": "hello world"}], "gpt-4-0314"
    )
    # name costs its own token(s) plus one extra
    assert with_name == without_name + 2
