"""SchoolPay - school fee payment orders and gateway webhook reconciliation."""
