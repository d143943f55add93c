"""Shop API - e-commerce backend service"""
