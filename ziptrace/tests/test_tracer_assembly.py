"""Tests for tracer assembly, customizers and sealing."""

import pytest
from opentelemetry.sdk.trace.id_generator import RandomIdGenerator

from ziptrace.errors import TracerSealedError
from ziptrace.reporter import NoopReporter
from ziptrace.sampler import ALWAYS_SAMPLE, BoundarySampler, CountingSampler
from ziptrace.tracer import Tracer, TracerBuilder, TracerCustomizer, assemble_tracer


class TagCustomizer(TracerCustomizer):
    def __init__(self, key, value):
        self.key = key
        self.value = value

    def customize(self, builder):
        builder.add_tag(self.key, self.value)


class TestCustomizers:
    """Test customizer ordering and visibility."""

    def test_tags_follow_registration_order(self, capturing_reporter):
        customizers = [
            lambda builder: builder.add_tag("first", "1"),
            lambda builder: builder.add_tag("second", "2"),
        ]

        tracer = assemble_tracer("orders", ALWAYS_SAMPLE, capturing_reporter, customizers)
        try:
            assert tracer.tags == (("first", "1"), ("second", "2"))

            tracer.start_span("op").end()
            attributes = capturing_reporter.spans[0].attributes
            assert list(attributes)[:2] == ["first", "second"]
        finally:
            tracer.close()

    def test_reversed_registration_reverses_tags(self, capturing_reporter):
        customizers = [TagCustomizer("b", 2), TagCustomizer("a", 1)]

        tracer = assemble_tracer("orders", ALWAYS_SAMPLE, capturing_reporter, customizers)
        try:
            assert tracer.tags == (("b", 2), ("a", 1))
        finally:
            tracer.close()

    def test_later_customizers_see_earlier_changes(self, capturing_reporter):
        seen = []

        def rename(builder):
            builder.set_service_name("renamed")

        def observe(builder):
            seen.append(builder.service_name)

        tracer = assemble_tracer("original", ALWAYS_SAMPLE, capturing_reporter, [rename, observe])
        try:
            assert seen == ["renamed"]
            assert tracer.service_name == "renamed"
        finally:
            tracer.close()

    def test_customizer_can_replace_sampler(self, capturing_reporter):
        sampler = BoundarySampler(0.0)

        tracer = assemble_tracer(
            "svc", ALWAYS_SAMPLE, capturing_reporter, [lambda b: b.set_sampler(sampler)]
        )
        try:
            assert tracer.sampler is sampler
        finally:
            tracer.close()

    def test_no_customizers(self, capturing_reporter):
        tracer = assemble_tracer("svc", ALWAYS_SAMPLE, capturing_reporter, [])
        try:
            assert tracer.tags == ()
            assert tracer.reporter is capturing_reporter
        finally:
            tracer.close()


class TestSealing:
    """Test that assembly is terminal."""

    def test_builder_rejects_changes_after_build(self):
        builder = TracerBuilder("svc", ALWAYS_SAMPLE, NoopReporter())
        tracer = builder.build()
        try:
            assert builder.sealed
            with pytest.raises(TracerSealedError):
                builder.add_tag("late", "tag")
            with pytest.raises(TracerSealedError):
                builder.set_sampler(BoundarySampler(0.5))
            with pytest.raises(TracerSealedError):
                builder.set_reporter(NoopReporter())
            with pytest.raises(TracerSealedError):
                builder.set_service_name("other")
            with pytest.raises(TracerSealedError):
                builder.build()
        finally:
            tracer.close()

    def test_tracer_is_read_only(self):
        tracer = TracerBuilder("svc", ALWAYS_SAMPLE, NoopReporter()).build()
        try:
            with pytest.raises(AttributeError):
                tracer.sampler = BoundarySampler(0.5)
            with pytest.raises(AttributeError):
                tracer.service_name = "other"
            with pytest.raises(AttributeError):
                tracer.extra = "value"
        finally:
            tracer.close()

    def test_invalid_parts_are_rejected(self):
        with pytest.raises(TypeError):
            TracerBuilder("svc", object(), NoopReporter()).build()
        with pytest.raises(TypeError):
            TracerBuilder("svc", ALWAYS_SAMPLE, object()).build()

    def test_blank_service_name_falls_back(self):
        builder = TracerBuilder("", ALWAYS_SAMPLE, NoopReporter())

        assert builder.service_name == "unknown-service"


class TestTracer:
    """Test spans produced by an assembled tracer."""

    def test_finished_spans_reach_reporter(self, capturing_reporter):
        tracer = assemble_tracer("billing", ALWAYS_SAMPLE, capturing_reporter)
        try:
            with tracer.start_as_current_span("charge", attributes={"amount": 10}):
                with tracer.start_as_current_span("db"):
                    pass

            names = [span.name for span in capturing_reporter.spans]
            assert names == ["db", "charge"]
            assert capturing_reporter.spans[0].resource.attributes["service.name"] == "billing"
        finally:
            tracer.close()

    def test_explicit_attributes_win_over_default_tags(self, capturing_reporter):
        tracer = assemble_tracer(
            "svc", ALWAYS_SAMPLE, capturing_reporter, [lambda b: b.add_tag("env", "prod")]
        )
        try:
            tracer.start_span("op", attributes={"env": "test"}).end()

            assert capturing_reporter.spans[0].attributes["env"] == "test"
        finally:
            tracer.close()

    def test_unsampled_traces_are_not_reported(self, capturing_reporter):
        tracer = assemble_tracer("svc", BoundarySampler(0.0), capturing_reporter)
        try:
            for _ in range(20):
                tracer.start_span("op").end()

            assert capturing_reporter.spans == []
        finally:
            tracer.close()

    def test_children_follow_root_decision(self, capturing_reporter):
        tracer = assemble_tracer("svc", CountingSampler(0.5), capturing_reporter)
        try:
            for _ in range(100):
                with tracer.start_as_current_span("root") as root:
                    with tracer.start_as_current_span("child") as child:
                        assert (
                            child.get_span_context().trace_flags.sampled
                            == root.get_span_context().trace_flags.sampled
                        )

            roots = [s for s in capturing_reporter.spans if s.name == "root"]
            children = [s for s in capturing_reporter.spans if s.name == "child"]
            assert len(roots) == len(children) == 50
        finally:
            tracer.close()

    def test_builder_resource_and_id_generator(self, capturing_reporter):
        def customize(builder):
            builder.set_resource_attribute("deployment.environment", "staging")
            builder.set_id_generator(RandomIdGenerator())
            builder.set_instrumentation_scope("custom-scope")

        tracer = assemble_tracer("svc", ALWAYS_SAMPLE, capturing_reporter, [customize])
        try:
            tracer.start_span("op").end()

            span = capturing_reporter.spans[0]
            assert span.resource.attributes["deployment.environment"] == "staging"
            assert span.instrumentation_scope.name == "custom-scope"
        finally:
            tracer.close()

    def test_scoped_tracer_shares_pipeline(self, capturing_reporter):
        tracer = assemble_tracer("svc", ALWAYS_SAMPLE, capturing_reporter, [lambda b: b.add_tag("team", "core")])
        try:
            library_tracer = tracer.get_tracer("payments-client")
            library_tracer.start_span("charge").end()

            span = capturing_reporter.spans[0]
            assert span.name == "charge"
            assert span.instrumentation_scope.name == "payments-client"
            assert span.attributes["team"] == "core"
            assert span.resource.attributes["service.name"] == "svc"
        finally:
            tracer.close()

    def test_close_is_idempotent_and_closes_reporter(self, capturing_reporter):
        tracer = assemble_tracer("svc", ALWAYS_SAMPLE, capturing_reporter)

        tracer.close()
        tracer.close()

        assert tracer.closed
        assert capturing_reporter.closed
        assert isinstance(tracer, Tracer)
