from datetime import timedelta

import pytest
from sqlalchemy import event
from sqlmodel import Session, select

from app.core.errors import ValidationError
from app.db.models import OtpRecord
from app.services.auth import otp_service as otp_module
from app.services.auth.otp_service import OTPService, OtpCheckResult, normalize_email


@pytest.fixture
def otp_service(session, clock, fixed_rng):
    return OTPService(session, now=clock, rng=fixed_rng(123456))


def records_for(session, email):
    return session.exec(select(OtpRecord).where(OtpRecord.email == email)).all()


def test_generate_and_verify_once(otp_service):
    code = otp_service.generate_otp("a@x.com")
    assert code == "123456"

    assert otp_service.verify_otp("a@x.com", "123456") is True
    assert otp_service.verify_otp("a@x.com", "123456") is False


def test_expired_code_is_rejected_and_removed(otp_service, session, clock):
    otp_service.generate_otp("a@x.com")
    clock.advance(minutes=11)

    assert otp_service.check_otp("a@x.com", "123456") is OtpCheckResult.EXPIRED
    assert records_for(session, "a@x.com") == []
    assert otp_service.check_otp("a@x.com", "123456") is OtpCheckResult.MISSING


def test_code_still_valid_at_expiry_instant(otp_service, clock):
    otp_service.generate_otp("a@x.com")
    clock.advance(minutes=10)

    assert otp_service.verify_otp("a@x.com", "123456") is True


def test_regeneration_leaves_single_record(session, clock, fixed_rng):
    service = OTPService(session, now=clock, rng=fixed_rng(111111, 222222))
    first = service.generate_otp("a@x.com")
    second = service.generate_otp("a@x.com")

    assert (first, second) == ("111111", "222222")
    rows = records_for(session, "a@x.com")
    assert len(rows) == 1
    assert service.verify_otp("a@x.com", first) is False
    assert service.verify_otp("a@x.com", second) is True


def test_email_lookup_is_case_insensitive(otp_service, session):
    otp_service.generate_otp("  Alice@Example.COM ")

    assert [r.email for r in records_for(session, "alice@example.com")] == ["alice@example.com"]
    assert otp_service.verify_otp("ALICE@example.com", "123456") is True


def test_mismatch_keeps_code_live(otp_service):
    otp_service.generate_otp("a@x.com")

    assert otp_service.check_otp("a@x.com", "654321") is OtpCheckResult.MISMATCH
    assert otp_service.check_otp("a@x.com", "123456") is OtpCheckResult.VALID


def test_unknown_email_is_missing(otp_service):
    assert otp_service.check_otp("nobody@x.com", "123456") is OtpCheckResult.MISSING
    assert otp_service.verify_otp("nobody@x.com", "123456") is False


def test_generated_code_is_six_digits(session, clock):
    service = OTPService(session, now=clock)
    for _ in range(20):
        code = service.generate_otp("a@x.com")
        assert len(code) == 6 and code.isdigit()
        assert 100000 <= int(code) <= 999999


def test_blank_email_rejected(otp_service):
    with pytest.raises(ValidationError):
        otp_service.generate_otp("   ")


def test_purge_expired_removes_only_stale_codes(session, clock, fixed_rng):
    service = OTPService(session, now=clock, rng=fixed_rng(123456))
    service.generate_otp("old@x.com")
    clock.advance(minutes=30)
    service.generate_otp("new@x.com")

    assert service.purge_expired() == 1
    assert records_for(session, "old@x.com") == []
    assert len(records_for(session, "new@x.com")) == 1


def test_normalize_email():
    assert normalize_email(" Bob@X.Com ") == "bob@x.com"
    assert normalize_email(None) == ""


def test_stored_timestamps_are_naive_utc(otp_service, session, clock):
    otp_service.generate_otp("a@x.com")
    session.expire_all()

    record = records_for(session, "a@x.com")[0]
    assert record.created_at.tzinfo is None
    assert record.created_at == clock()
    assert record.expires_at == clock() + timedelta(minutes=10)


def test_concurrent_generation_leaves_one_live_code(engine, clock, fixed_rng):
    with Session(engine) as first, Session(engine) as second:
        racing = OTPService(first, now=clock, rng=fixed_rng(111111, 333333))
        other = OTPService(second, now=clock, rng=fixed_rng(222222))
        issued = []

        # The other request commits its code between our delete and our insert
        def interleave(session, flush_context, instances):
            if not issued:
                issued.append(other.generate_otp("a@x.com"))

        event.listen(first, "before_flush", interleave)
        code = racing.generate_otp("a@x.com")

    assert issued == ["222222"]
    assert code == "333333"
    with Session(engine) as check:
        assert len(records_for(check, "a@x.com")) == 1
        service = OTPService(check, now=clock)
        assert service.verify_otp("a@x.com", "222222") is False
        assert service.verify_otp("a@x.com", "333333") is True


def test_concurrent_verification_succeeds_once(engine, clock, fixed_rng, monkeypatch):
    with Session(engine) as setup:
        OTPService(setup, now=clock, rng=fixed_rng(123456)).generate_otp("a@x.com")

    real_compare = otp_module.secrets.compare_digest
    raced = []
    results = []

    with Session(engine) as first, Session(engine) as second:
        other = OTPService(second, now=clock)

        # The other verifier consumes the code after we matched it, before we delete it
        def compare_then_race(a, b):
            if not raced:
                raced.append(True)
                results.append(other.verify_otp("a@x.com", "123456"))
            return real_compare(a, b)

        monkeypatch.setattr(otp_module.secrets, "compare_digest", compare_then_race)
        results.append(OTPService(first, now=clock).verify_otp("a@x.com", "123456"))

    assert results == [True, False]
    with Session(engine) as check:
        assert records_for(check, "a@x.com") == []
