import logging
import random

import pytest
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from tests.typeables_fixtures.logging import TypeablesLog
from typeables import (
    GenerationOptions,
    PropertyFailedError,
    RandomSource,
    Typeable,
    assert_property,
    boolean,
    check,
    for_all,
    list_of,
    number,
    text,
)


def test_counterexample_is_shrunk(rng: random.Random) -> None:
    result = check(number(integer=True), lambda x: x < 10, rng=rng)
    assert not result.passed
    assert result.counterexample == 10
    assert result.original is not None and result.original >= 10
    assert result.error is None


def test_passing_property_runs_every_example() -> None:
    seen: list[bool] = []

    def prop(value: bool) -> bool:
        seen.append(value)
        return True

    result = check(boolean(), prop, GenerationOptions(max_examples=25, seed=3))
    assert result.passed
    assert result.examples_run == 25
    assert result.counterexample is None
    assert len(seen) == 25


def test_only_false_fails() -> None:
    result = check(number(), lambda x: None, GenerationOptions(seed=1))
    assert result.passed


def test_exception_is_a_failure(rng: random.Random) -> None:
    def prop(values: list[bool]) -> None:
        if True in values:
            raise ValueError("boom")

    result = check(list_of(boolean()), prop, rng=rng)
    assert not result.passed
    assert result.counterexample == [True]
    assert isinstance(result.error, ValueError)


def test_sizes_grow_with_examples() -> None:
    lengths: list[int] = []

    def prop(value: str) -> bool:
        lengths.append(len(value))
        return True

    check(text(ascii=True), prop, GenerationOptions(max_examples=50, max_size=3))
    assert lengths[0] == 0
    assert max(lengths) <= 3


def test_max_shrinks_limits_steps(rng: random.Random) -> None:
    options = GenerationOptions(max_shrinks=0)
    result = check(number(integer=True), lambda x: x < 10, options, rng)
    assert result.shrink_steps == 0
    assert result.counterexample == result.original


def test_seed_makes_runs_repeatable() -> None:
    options = GenerationOptions(seed=5)
    first = check(number(integer=True), lambda x: x < 10, options)
    second = check(number(integer=True), lambda x: x < 10, options)
    assert first == second


def test_assert_property_raises() -> None:
    with pytest.raises(PropertyFailedError) as exc_info:
        assert_property(
            number(integer=True), lambda x: x < 10, GenerationOptions(seed=2)
        )
    assert exc_info.value.result.counterexample == 10
    assert "counterexample 10" in str(exc_info.value)


def test_assert_property_reports_the_raised_error() -> None:
    def prop(value: bool) -> None:
        if value:
            raise KeyError("flag")

    with pytest.raises(PropertyFailedError, match="raised KeyError"):
        assert_property(boolean(), prop, GenerationOptions(seed=0))


def test_for_all_wraps_a_test() -> None:
    calls: list[float] = []

    @for_all(number(minimum=0, maximum=1), GenerationOptions(max_examples=10))
    def prop(x: float) -> None:
        """Unit interval."""
        calls.append(x)
        assert 0 <= x <= 1

    assert prop.__name__ == "prop"
    assert prop.__qualname__ == "test_for_all_wraps_a_test.<locals>.prop"
    assert prop.__module__ == __name__
    assert prop.__doc__ == "Unit interval."
    prop()
    assert len(calls) == 10


def test_for_all_raises_on_failure() -> None:
    @for_all(number(integer=True), GenerationOptions(seed=9))
    def prop(x: int) -> None:
        assert x < 10

    with pytest.raises(PropertyFailedError) as exc_info:
        prop()
    assert exc_info.value.result.counterexample == 10
    assert isinstance(exc_info.value.result.error, AssertionError)


class TestTracing:
    def test_passing_check_span(self, span_exporter: InMemorySpanExporter) -> None:
        check(boolean(), lambda x: True, GenerationOptions(max_examples=5))
        spans = span_exporter.get_finished_spans()
        assert [span.name for span in spans] == ["typeables.check"]
        assert spans[0].status.status_code == StatusCode.OK
        assert spans[0].attributes is not None
        assert spans[0].attributes["typeables.examples_run"] == 5
        assert tuple(spans[0].attributes["typeables.schema_type"]) == ("boolean",)

    def test_failing_check_span(self, span_exporter: InMemorySpanExporter) -> None:
        check(number(integer=True), lambda x: x < 10, GenerationOptions(seed=4))
        spans = span_exporter.get_finished_spans()
        assert len(spans) == 1
        assert spans[0].status.status_code == StatusCode.ERROR
        assert spans[0].status.description == "counterexample: 10"

    def test_raised_error_is_recorded(
        self, span_exporter: InMemorySpanExporter
    ) -> None:
        def prop(value: bool) -> None:
            if value:
                raise RuntimeError("bad flag")

        check(boolean(), prop, GenerationOptions(seed=0))
        (span,) = span_exporter.get_finished_spans()
        assert [event.name for event in span.events] == ["exception"]

    def test_generator_error_escapes(
        self, span_exporter: InMemorySpanExporter
    ) -> None:
        def explode(size: int, rng: RandomSource) -> bool:
            raise RuntimeError("generator broke")

        broken = Typeable(explode, boolean().shrinker, boolean().schema)
        with pytest.raises(RuntimeError):
            check(broken, lambda x: True)
        (span,) = span_exporter.get_finished_spans()
        assert span.status.status_code == StatusCode.ERROR
        assert span.status.description == "RuntimeError: generator broke"


class TestLogging:
    def test_failure_is_logged(self, typeables_log: TypeablesLog) -> None:
        options = GenerationOptions(seed=6)
        result = check(number(integer=True), lambda x: x < 10, options)
        infos = typeables_log.messages(logging.INFO)
        assert len(infos) == 1
        assert infos[0].endswith("to 10")
        shrink_steps = [
            m for m in typeables_log.messages() if m.startswith("Shrink step")
        ]
        assert len(shrink_steps) == result.shrink_steps
        typeables_log.assert_no_errors()

    def test_pass_is_quiet(self, typeables_log: TypeablesLog) -> None:
        check(boolean(), lambda x: True, GenerationOptions(max_examples=5))
        assert typeables_log.messages(logging.INFO) == []

    def test_raising_predicate_is_logged(self, typeables_log: TypeablesLog) -> None:
        def prop(value: bool) -> None:
            if value:
                raise ValueError("nope")

        check(boolean(), prop, GenerationOptions(seed=0))
        assert any(
            m.startswith("Predicate raised ValueError")
            for m in typeables_log.messages(logging.DEBUG)
        )
