"""
Fixed vocabularies the form, data and policy graphs are queried against.
"""
from rdflib import Namespace
from rdflib.namespace import PROV, RDF, SKOS, XSD

UI = Namespace("http://www.w3.org/ns/ui#")
EX = Namespace("http://example.org/")
POL = Namespace("https://www.example.org/ns/policy#")
FNO = Namespace("https://w3id.org/function/ontology#")
HTTP = Namespace("http://www.w3.org/2011/http#")
SOLID = Namespace("http://www.w3.org/ns/solid/terms#")

# SPARQL prologue shared by every query issued against form or policy graphs
QUERY_PREFIXES = f"""
PREFIX ui: <{UI}>
PREFIX rdf: <{RDF}>
PREFIX skos: <{SKOS}>
PREFIX ex: <{EX}>
PREFIX pol: <{POL}>
PREFIX fno: <{FNO}>
PREFIX http: <{HTTP}>
"""

__all__ = [
    "EX",
    "FNO",
    "HTTP",
    "POL",
    "PROV",
    "QUERY_PREFIXES",
    "RDF",
    "SKOS",
    "SOLID",
    "UI",
    "XSD",
]
