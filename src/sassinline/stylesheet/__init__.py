from sassinline.stylesheet.model import AtRule, Declaration, Rule, Stylesheet
from sassinline.stylesheet.parser import parse_css

__all__ = ["parse_css", "Stylesheet", "Rule", "AtRule", "Declaration"]
