def int_div(numerator: int, denominator: int) -> int:
    """
    Integer division truncating toward zero.

    Raises:
        ZeroDivisionError: if denominator is 0; callers must guard this case
    """
    if denominator == 0:
        raise ZeroDivisionError(f"int_div({numerator}, 0)")

    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient
