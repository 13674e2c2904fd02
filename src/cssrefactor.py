#!/usr/bin/env python
# -*- coding:utf-8 -*-

"""
first, pull a Grouping out of every plain rule
then, merge groupings whose declarations are identical
then, factor out declaration subsets shared with smaller groupings:
	a rule whose declarations are all contained in a bigger rule takes over the
	bigger rule's selectors, and the bigger rule keeps only what is left
"""

import logging

from cssparse import CSSDoc, AtRule
from cssgroup import Grouping, MalformedRuleError, declarations_size

log = logging.getLogger(__name__)

def extract(stylesheet, strict=True):
	"""one Grouping per plain rule that resolves to at least one declaration"""
	groupings = []
	for r in stylesheet.rules:
		if getattr(r, 'type', None) != 'rule':
			continue
		try:
			g = Grouping.from_ast(r)
		except MalformedRuleError as e:
			if strict:
				raise
			log.warning('skipping malformed rule at %s: %s',
				getattr(r, 'position', None), e)
			continue
		if g.declarations:
			groupings.append(g)
		else:
			log.debug('dropping empty rule %s', g.selectors)
	return groupings

def merge_selectors(groupings):
	"""
	for each unique selector:
		merge all specified decls, later ones winning
	"""
	sel_groupings = {}
	for g in groupings:
		decls = g.declarations
		for sel in g.selectors:
			try:
				sel_groupings[sel].add_declarations(decls)
			except KeyError:
				sel_groupings[sel] = Grouping(decls, [sel])
	return list(sel_groupings.values())

def merge_exact(groupings):
	"""
	pop groupings off the end and fold each into the first remaining one with
	the same declarations. consumes groupings.
	"""
	finished = []
	while groupings:
		current = groupings.pop()
		for g in groupings:
			c = Grouping.compare_declarations(current, g)
			if not c.in_first_only and not c.in_second_only and c.in_both:
				log.debug('merging %s into %s', current.selectors, g.selectors)
				g.add_selectors(current.selectors)
				break
		else:
			finished.append(current)
	return finished

class Cluster:
	"""candidates folded together, and the union of their selectors/declarations"""
	def __init__(self, grouping):
		self.total = Grouping(grouping.declarations, grouping.selectors)
		self.members = [grouping]
	def __repr__(self):
		return 'Cluster(%s)' % (self.members,)
	def gain(self, grouping, cost):
		"""what adding grouping would be worth: its declarations new to us, less one selector list"""
		new = Grouping.compare_declarations(self.total, grouping).in_second_only
		return declarations_size(new) - cost
	def add(self, grouping):
		self.total.add_selectors(grouping.selectors)
		self.total.add_declarations(grouping.declarations)
		self.members.append(grouping)
	def score(self, cost):
		return self.total.declaration_size() - len(self.members) * cost

def is_subset(grouping, target):
	return bool(grouping.declarations) and \
		not Grouping.compare_declarations(target, grouping).in_second_only

def clusters_for(target, groupings):
	cost = target.selector_size()
	clusters = []
	for g in groupings:
		if not is_subset(g, target):
			continue
		for c in clusters:
			if c.gain(g, cost) > 0:
				c.add(g)
		clusters.append(Cluster(g))
	return clusters

def merge_subsets(groupings):
	"""
	biggest groupings first: for each, find the cluster of later groupings
	contained in it that saves the most, drop the cluster's declarations
	from it and hand its selectors to the cluster's members.
	"""
	groupings.sort(key=lambda g: len(g.declarations), reverse=True)
	for i, target in enumerate(groupings):
		clusters = clusters_for(target, groupings[i+1:])
		if not clusters:
			continue
		cost = target.selector_size()
		best, bestscore = clusters[0], clusters[0].score(cost)
		for c in clusters[1:]:
			score = c.score(cost)
			if score > bestscore:
				best, bestscore = c, score
		log.debug('factoring %s out of %s (saves %d)',
			best.total.declarations, target.selectors, bestscore)
		target.remove_declarations(best.total.declarations)
		for g in best.members:
			g.add_selectors(target.selectors)
	return [g for g in groupings if g.declarations]

def calc_size(groupings):
	return sum(g.declaration_size() + g.selector_size() for g in groupings)

class CSSRefactor:
	def __init__(self, doc, subsets=True, by_selector=False, strict=True):
		self.doc = doc
		groupings = extract(doc, strict)
		self.before = calc_size(groupings)
		if by_selector:
			groupings = merge_selectors(groupings)
		groupings = merge_exact(groupings)
		if subsets:
			groupings = merge_subsets(groupings)
		self.groupings = groupings
		self.after = calc_size(groupings)
		log.info('%u groupings, size %u -> %u',
			len(groupings), self.before, self.after)

	def rules(self):
		return [Grouping.to_ast(g) for g in self.groupings]

	def stylesheet(self):
		"""
		rebuild a document: statement at-rules (@import etc.) first, then
		our rules, then every other at-rule untouched
		"""
		passthru = [r for r in self.doc.rules
			if getattr(r, 'type', None) not in ('rule', 'comment', 'whitespace')]
		head = [r for r in passthru if isinstance(r, AtRule) and r.is_statement()]
		tail = [r for r in passthru if r not in head]
		return CSSDoc(head + self.rules() + tail, getattr(self.doc, 'source', None))

	def format(self):
		return self.stylesheet().format()
