"""
Tests for the Audit Logger and Sinks
"""

import pytest
from uuid import uuid4

from finance_engine.audit import AuditLogger, AuditSink, InMemoryAuditSink, create_correlation_id
from finance_engine.models import AuditEvent, AuditEventBuilder, AuditEventType


class FailingSink(AuditSink):
    """A sink whose backend is down."""

    def append_event(self, event: AuditEvent) -> bool:
        raise ConnectionError("audit store unavailable")


class TestInMemorySink:
    """Tests for InMemoryAuditSink."""

    def test_events_are_kept_in_order(self):
        sink = InMemoryAuditSink()
        sink.append_event(AuditEventBuilder.duplicate_account("a"))
        sink.append_event(AuditEventBuilder.transfer_without_destination("t1"))

        assert [e.event_type for e in sink.events] == [
            AuditEventType.DUPLICATE_ACCOUNT,
            AuditEventType.TRANSFER_WITHOUT_DESTINATION,
        ]

    def test_filter_by_entity(self):
        sink = InMemoryAuditSink()
        sink.append_event(AuditEventBuilder.transfer_without_destination("t1"))
        sink.append_event(AuditEventBuilder.transfer_destination_not_found("t1", "ghost"))
        sink.append_event(AuditEventBuilder.transfer_without_destination("t2"))

        assert len(sink.get_events_by_entity("t1")) == 2
        assert len(sink.get_events_by_entity(
            "t1", AuditEventType.TRANSFER_DESTINATION_NOT_FOUND,
        )) == 1

    def test_clear(self):
        sink = InMemoryAuditSink()
        sink.append_event(AuditEventBuilder.duplicate_account("a"))
        sink.clear()
        assert sink.events == []


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_log_without_sink(self):
        assert AuditLogger().log(AuditEventBuilder.duplicate_account("a")) is True

    def test_log_forwards_to_sink(self):
        sink = InMemoryAuditSink()
        assert AuditLogger(sink).log(AuditEventBuilder.duplicate_account("a")) is True
        assert len(sink.events) == 1

    def test_failing_sink_does_not_raise(self):
        logger = AuditLogger(FailingSink())
        assert logger.log(AuditEventBuilder.duplicate_account("a")) is False

    def test_correlation_id_is_stamped(self):
        sink = InMemoryAuditSink()
        correlation_id = create_correlation_id()
        AuditLogger(sink, correlation_id).log(AuditEventBuilder.duplicate_account("a"))

        assert sink.get_events_by_correlation_id(correlation_id)

    def test_event_correlation_id_wins(self):
        sink = InMemoryAuditSink()
        own_id = uuid4()
        logger = AuditLogger(sink, create_correlation_id())
        logger.log(AuditEventBuilder.duplicate_account("a", correlation_id=own_id))

        assert sink.events[0].correlation_id == own_id

    def test_with_correlation(self):
        sink = InMemoryAuditSink()
        correlation_id = create_correlation_id()
        scoped = AuditLogger(sink).with_correlation(correlation_id)
        scoped.log(AuditEventBuilder.settlement_computed(3, 1))

        assert scoped.correlation_id == correlation_id
        assert sink.events[0].correlation_id == correlation_id


class TestAuditEventBuilder:
    """Events built from arbitrary ledger ids."""

    @pytest.mark.parametrize("build", [
        lambda long_id: AuditEventBuilder.duplicate_account(long_id),
        lambda long_id: AuditEventBuilder.transfer_destination_not_found("t1", long_id),
        lambda long_id: AuditEventBuilder.transfer_without_destination(long_id),
        lambda long_id: AuditEventBuilder.transaction_without_source(long_id),
    ])
    def test_long_ids_stay_out_of_the_description(self, build):
        long_id = "x" * 600
        event = build(long_id)
        assert long_id not in event.description
        assert long_id in (event.entity_id, *event.details.values())

    def test_transaction_without_source_is_an_error(self):
        event = AuditEventBuilder.transaction_without_source("t1")
        assert event.event_type == AuditEventType.TRANSACTION_WITHOUT_SOURCE
        assert event.severity.value == "error"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
