from prometheus_client import Counter, Histogram


class MembershipMetrics:
    """
    Membership backend business metrics

    Tracks sign ups and wait list promotion, the payment pipeline, cabin
    bookings and the background worker.
    """

    def __init__(self):
        # ========== Event Sign Up Metrics ==========
        self.sign_ups = Counter(
            'event_sign_ups_total',
            'Sign ups by resulting participation status',
            ['status'],  # CONFIRMED/ON_WAITLIST/RETRACTED/REMOVED
        )

        self.sign_up_attempts = Histogram(
            'event_sign_up_attempts',
            'Optimistic concurrency attempts needed per sign up',
            buckets=[1, 2, 3, 5, 10, 20],
        )

        self.wait_list_promotions = Counter(
            'event_wait_list_promotions_total', 'Sign ups promoted from the wait list'
        )

        # ========== Payment Metrics ==========
        self.payment_attempts = Counter(
            'payment_attempts_total',
            'Payment attempts by observed state',
            ['state'],  # CREATED/AUTHORIZED/FAILED/TERMINATED/EXPIRED/ABORTED
        )

        self.payment_captures = Counter(
            'payment_captures_total', 'Captured payments', ['result']
        )

        # ========== Cabin Metrics ==========
        self.cabin_bookings = Counter(
            'cabin_bookings_total',
            'Cabin bookings by status transition',
            ['status'],
        )

        # ========== Worker Metrics ==========
        self.emails_sent = Counter(
            'emails_sent_total', 'Emails delivered', ['type', 'result']
        )

        self.job_failures = Counter(
            'worker_job_failures_total',
            'Background jobs that failed',
            ['job', 'error_type'],
        )

        self.job_duration = Histogram(
            'worker_job_duration_seconds',
            'Background job duration',
            ['job'],
            buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
        )

    # ========== Helper Methods ==========

    def record_sign_up(self, *, status: str, attempts: int = 1):
        self.sign_ups.labels(status=status).inc()
        self.sign_up_attempts.observe(attempts)

    def record_wait_list_promotion(self):
        self.wait_list_promotions.inc()

    def record_payment_attempt(self, *, state: str):
        self.payment_attempts.labels(state=state).inc()

    def record_payment_capture(self, *, result: str):
        self.payment_captures.labels(result=result).inc()

    def record_cabin_booking(self, *, status: str):
        self.cabin_bookings.labels(status=status).inc()

    def record_email(self, *, email_type: str, result: str):
        self.emails_sent.labels(type=email_type, result=result).inc()

    def record_job(self, *, job: str, duration: float, error_type: str | None = None):
        self.job_duration.labels(job=job).observe(duration)
        if error_type is not None:
            self.job_failures.labels(job=job, error_type=error_type).inc()


# Global metrics instance
metrics = MembershipMetrics()
