import pytest

from cssgroup import Grouping, Declaration, MalformedRuleError
from cssparse import Rule, Decl

def grouping(selectors, **decls):
	return Grouping([(p.replace('_', '-'), v) for p, v in decls.items()], selectors)


class TestDeclarations:
	def test_last_write_wins(self):
		g = Grouping([('color', 'red')], ['a'])
		g.add_declarations(Declaration('color', 'blue'))
		assert g.declarations == [Declaration('color', 'blue')]
		assert g.property_map() == {'color': 'blue'}

	def test_no_duplicate_properties(self):
		g = Grouping([('color', 'red'), ('margin', '0'), ('color', 'blue')], ['a'])
		g.add_declarations([('margin', '1px'), ('padding', '0')])
		props = [d.property for d in g.declarations]
		assert sorted(props) == ['color', 'margin', 'padding']
		assert g.property_map() == {'color': 'blue', 'margin': '1px', 'padding': '0'}

	def test_property_map_tracks_in_place_appends(self):
		g = Grouping([('color', 'red')], ['a'])
		assert g.property_map() == {'color': 'red'}
		g.add_declarations(('color', 'green'))
		assert g.property_map() == {'color': 'green'}
		g.remove_declarations(('color', 'green'))
		assert g.property_map() == {}

	def test_accepts_decl_nodes(self):
		g = Grouping([Decl('color', 'red')], ['a'])
		g.add_declarations(Decl('margin', '0'))
		assert g.declarations == [('color', 'red'), ('margin', '0')]

	def test_tuple_and_generator(self):
		g = Grouping([], ['a'])
		g.add_declarations((Declaration('color', 'red'), Declaration('margin', '0')))
		g.add_declarations(Decl(p, v) for p, v in [('padding', '0'), ('color', 'blue')])
		assert g.declarations == [('color', 'blue'), ('margin', '0'), ('padding', '0')]
		g.remove_declarations((('margin', '0'), ('padding', '1px')))
		g.remove_declarations(d for d in [Declaration('color', 'blue')])
		assert g.declarations == [('padding', '0')]

	def test_remove_matching_value(self):
		g = grouping(['a'], color='red', margin='0')
		g.remove_declarations(Declaration('color', 'red'))
		assert g.declarations == [('margin', '0')]

	def test_remove_ignores_stale_value(self):
		g = grouping(['a'], color='red', margin='0')
		g.remove_declarations([('color', 'blue'), ('padding', '0')])
		assert g.declarations == [('color', 'red'), ('margin', '0')]

	def test_remove_overridden_value_is_noop(self):
		g = Grouping([('color', 'red'), ('color', 'blue')], ['a'])
		g.remove_declarations(('color', 'red'))
		assert g.declarations == [('color', 'blue')]
		g.remove_declarations(('color', 'blue'))
		assert g.declarations == []


class TestSelectors:
	def test_add_is_idempotent(self):
		g = grouping(['div', 'span'], color='red')
		g.add_selectors('div')
		g.add_selectors(['span', 'div'])
		assert g.selectors == ['div', 'span']

	def test_appends_in_argument_order(self):
		g = grouping(['div'], color='red')
		g.add_selectors(['p', 'a', 'div', 'p'])
		assert g.selectors == ['div', 'p', 'a']

	def test_tuple_and_generator(self):
		g = grouping(['x'], color='red')
		g.add_selectors(('y', 'z'))
		g.add_selectors(s for s in ['z', 'w'])
		assert g.selectors == ['x', 'y', 'z', 'w']
		assert Grouping([('color', 'red')], ('a', 'b')).selectors == ['a', 'b']

	def test_constructor_dedupes_and_copies(self):
		sels = ['a', 'b', 'a']
		g = Grouping([('color', 'red')], sels)
		g.add_selectors('c')
		assert g.selectors == ['a', 'b', 'c']
		assert sels == ['a', 'b', 'a']


class TestSize:
	def test_selector_size(self):
		assert grouping(['div', 'span']).selector_size() == 8
		assert grouping(['div']).selector_size() == 3
		assert grouping([]).selector_size() == 0

	def test_declaration_size(self):
		assert grouping(['a'], color='red').declaration_size() == 10
		assert grouping(['a'], color='red', margin='0').declaration_size() == 10 + 9
		assert grouping(['a']).declaration_size() == 0

	def test_overridden_values_not_counted(self):
		g = Grouping([('color', 'yellow'), ('color', 'red')], ['a'])
		assert g.declaration_size() == 10


class TestCompare:
	def test_partitions(self):
		a = grouping(['a'], color='red', margin='0', padding='1px')
		b = grouping(['b'], color='red', margin='1px', border='none')
		c = Grouping.compare_declarations(a, b)
		assert c.in_first_only == [('margin', '0'), ('padding', '1px')]
		assert c.in_second_only == [('margin', '1px'), ('border', 'none')]
		assert c.in_both == [('color', 'red')]

	def test_directional(self):
		a = grouping(['a'], color='red')
		b = grouping(['b'], color='red', margin='0')
		c = Grouping.compare_declarations(a, b)
		assert c.in_first_only == []
		assert c.in_second_only == [('margin', '0')]

	def test_identical(self):
		a = grouping(['a'], color='red', margin='0')
		b = Grouping([('margin', '0'), ('color', 'red')], ['b'])
		c = Grouping.compare_declarations(a, b)
		assert not c.in_first_only and not c.in_second_only
		assert len(c.in_both) == 2


class TestAst:
	def test_from_ast(self):
		rule = Rule(['h1', 'h2'], [Decl('color', 'red'), Decl('color', 'blue')])
		g = Grouping.from_ast(rule)
		assert g.selectors == ['h1', 'h2']
		assert g.declarations == [('color', 'blue')]
		g.add_selectors('h3')
		assert rule.selectors == ['h1', 'h2']

	def test_to_ast(self):
		g = Grouping([('color', 'red'), ('margin', '0'), ('color', 'blue')], ['p', 'a'])
		rule = Grouping.to_ast(g)
		assert rule.type == 'rule'
		assert rule.selectors == ['p', 'a']
		assert [(d.property, d.value) for d in rule.declarations] == \
			[('color', 'blue'), ('margin', '0')]
		assert rule.position is None

	def test_roundtrip(self):
		rule = Rule(['p'], [Decl('margin', '0')])
		again = Grouping.to_ast(Grouping.from_ast(rule))
		assert again.selectors == rule.selectors
		assert [d.format() for d in again.declarations] == \
			[d.format() for d in rule.declarations]

	@pytest.mark.parametrize('rule', [
		Rule(None, [Decl('color', 'red')]),
		Rule(['a'], None),
		Rule(['a', ''], [Decl('color', 'red')]),
		Rule(['a'], [Decl('color', None)]),
		Rule(['a'], [object()]),
	])
	def test_malformed(self, rule):
		with pytest.raises(MalformedRuleError) as e:
			Grouping.from_ast(rule)
		assert e.value.rule is rule
