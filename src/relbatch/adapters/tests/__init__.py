"""relbatch.adapters.tests package"""
