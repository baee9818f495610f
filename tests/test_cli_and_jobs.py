# tests/test_cli_and_jobs.py
from datetime import timedelta


def test_run_billing_cycle_command(app, make_billing):
    from sportmap_app.utils import utcnow

    make_billing(status="PAGO_SPORTMAP", next_paid_at=utcnow() - timedelta(hours=1))
    result = app.test_cli_runner().invoke(args=["run-billing-cycle"])
    assert result.exit_code == 0
    assert "1 fatura(s) gerada(s)." in result.output


def test_poll_payments_command(app, owner, make_payment, fake_stripe):
    p = make_payment(owner)
    fake_stripe.statuses[p.provider_payment_id] = "succeeded"
    result = app.test_cli_runner().invoke(args=["poll-payments"])
    assert result.exit_code == 0
    assert "1 pagamento(s) atualizado(s)." in result.output


def test_issue_boletos_command(app, make_owner):
    from sportmap_app.utils import utcnow

    make_owner(trial_ends_at=utcnow() - timedelta(days=1))
    result = app.test_cli_runner().invoke(args=["issue-boletos"])
    assert result.exit_code == 0
    assert "emitidos=1 pulados=0 falhas=0" in result.output


def test_init_db_command(app):
    result = app.test_cli_runner().invoke(args=["init-db"])
    assert result.exit_code == 0
    assert "Tabelas criadas." in result.output


def test_register_jobs_schedules_three_cron_jobs(app):
    from sportmap_app.extensions import scheduler
    from sportmap_app.jobs import register_jobs

    try:
        register_jobs(app)
        jobs = {j.id: j for j in scheduler.get_jobs()}
        assert set(jobs) == {"billing-cycle", "issue-boletos", "poll-payments"}
        assert "hour='*/3'" in str(jobs["billing-cycle"].trigger)
        assert "hour='0'" in str(jobs["issue-boletos"].trigger)
        assert "hour='*/6'" in str(jobs["poll-payments"].trigger)
    finally:
        scheduler.remove_all_jobs()


def test_job_errors_are_logged_not_raised(app, monkeypatch, caplog):
    from sportmap_app.jobs import _in_context

    def explode():
        raise RuntimeError("quebrou")

    run = _in_context(app, explode)
    run()
    assert "Rotina explode abortada" in caplog.text
