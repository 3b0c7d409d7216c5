"""Signup, migration, waitlist and analytics services.

Each service owns one collection in the ``RecordStore`` and performs every
write as a locked load -> mutate -> persist sequence.
"""
