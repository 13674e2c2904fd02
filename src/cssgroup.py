#!/usr/bin/env python
# -*- coding:utf-8 -*-

"""
a Grouping is a rule in the making: a selector list bound to a declaration list.

declarations are kept as an append-only log; the property map resolves it,
later values for the same property winning.
"""

from collections import namedtuple

from cssparse import Rule, Decl

Declaration = namedtuple('Declaration', 'property value')
Comparison = namedtuple('Comparison', 'in_first_only in_second_only in_both')

class MalformedRuleError(ValueError):
	"""a rule missing its selectors, its declarations or a declaration field"""
	def __init__(self, message, rule=None):
		self.rule = rule
		super().__init__(message)

def selector_list(x):
	"""a single selector string, or any iterable of them"""
	if isinstance(x, str):
		return [x]
	return list(x)

def is_declaration(x):
	if isinstance(x, tuple):
		return len(x) == 2 and all(isinstance(s, str) for s in x)
	return hasattr(x, 'property') and hasattr(x, 'value')

def declaration_list(x):
	"""a single declaration (pair or .property/.value object), or any iterable of them"""
	if is_declaration(x):
		return [x]
	return list(x)

def as_declaration(d):
	if isinstance(d, tuple):
		return Declaration(*d)
	return Declaration(d.property, d.value)

def declarations_size(declarations):
	# + 2 for the ':' and ';' of each declaration
	return sum(len(p) + len(v) + 2 for p, v in declarations)

class Grouping:
	def __init__(self, declarations=(), selectors=()):
		self._declarations = [as_declaration(d) for d in declarations]
		self.selectors = []
		self._selector_set = set()
		self._version = 0
		self._cache = None
		self.add_selectors(selectors)

	def __repr__(self):
		return 'Grouping(%s{%s})' % (','.join(self.selectors),
			';'.join('%s:%s' % d for d in self.declarations))

	def _touch(self):
		self._version += 1

	def property_map(self):
		if self._cache is None or self._cache[0] != self._version:
			m = {}
			for property_, value in self._declarations:
				m[property_] = value
			self._cache = (self._version, m)
		return self._cache[1]

	@property
	def declarations(self):
		return [Declaration(p, v) for p, v in self.property_map().items()]

	def add_selectors(self, selectors):
		for sel in selector_list(selectors):
			if sel not in self._selector_set:
				self._selector_set.add(sel)
				self.selectors.append(sel)

	def add_declarations(self, declarations):
		self._declarations.extend(as_declaration(d) for d in declaration_list(declarations))
		self._touch()

	def remove_declarations(self, declarations):
		"""remove each given declaration if it is what its property currently resolves to"""
		pm = self.property_map()
		remove = set()
		for property_, value in map(as_declaration, declaration_list(declarations)):
			if property_ in pm and pm[property_] == value:
				remove.add(property_)
		if remove:
			self._declarations = [d for d in self._declarations
						if d.property not in remove]
			self._touch()

	def declaration_size(self):
		return declarations_size(self.declarations)

	def selector_size(self):
		# + 1 for each separating ','
		return sum(map(len, self.selectors)) + max(0, len(self.selectors) - 1)

	@staticmethod
	def compare_declarations(a, b):
		amap = a.property_map()
		bmap = b.property_map()
		adecls = a.declarations
		return Comparison(
			[d for d in adecls if bmap.get(d.property) != d.value],
			[d for d in b.declarations if amap.get(d.property) != d.value],
			[d for d in adecls if bmap.get(d.property) == d.value])

	@staticmethod
	def from_ast(rule):
		selectors = getattr(rule, 'selectors', None)
		declarations = getattr(rule, 'declarations', None)
		if selectors is None or declarations is None:
			raise MalformedRuleError('rule has no %s' %
				('selectors' if selectors is None else 'declarations'), rule)
		for sel in selectors:
			if not isinstance(sel, str) or not sel:
				raise MalformedRuleError('bad selector %r' % (sel,), rule)
		decls = []
		for d in declarations:
			property_ = getattr(d, 'property', None)
			value = getattr(d, 'value', None)
			if not isinstance(property_, str) or not isinstance(value, str):
				raise MalformedRuleError('bad declaration %r' % (d,), rule)
			decls.append(Declaration(property_, value))
		return Grouping(decls, selectors)

	@staticmethod
	def to_ast(grouping):
		return Rule(list(grouping.selectors),
			[Decl(p, v) for p, v in grouping.declarations])
