from .math_utils import int_div
