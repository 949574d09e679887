"""Packing and unpacking of field elements between prime fields."""