"""
RO Service Manager: customers, service records and due-service reminders
for RO water purifier maintenance.
"""
__version__ = "1.0.0"
