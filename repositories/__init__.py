"""
repositories/ - Data Access Layer
==================================
Each repository answers the same store contract for Expense records:
insert, get, full-field update, hard delete, and the filtered queries.
ExpenseRepository talks to PostgreSQL; InMemoryExpenseRepository keeps
records in the process.
"""
