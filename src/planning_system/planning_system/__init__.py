"""Planning System package.

Weekly staff scheduling (the "Planning" feature of the CRM), organized by
feature modules (shifts, roster, planning) with a thin Flask controller layer
and service/repository layers on top of an external event store.
"""
