"""
The NUMERICS layer evaluates the loop functions that appear in symbolic
results and in generated libraries. It has NO knowledge of sympy.
"""
