"""Template pools for the local remark generator.

Placeholders: {name} focus item, {klass} its class, {when} "today" or
"tomorrow", {late} e.g. "3 days", {pending} e.g. "1 assignment".
"""

OVERDUE = [
    "{name} was due {late} ago. Bold of you to assume deadlines are suggestions.",
    "{klass} called. {name} is {late} late and filing a missing-person report.",
    "{name}: overdue by {late}. Procrastination has officially become a lifestyle.",
    "Fun fact: {name} stopped being 'upcoming' {late} ago.",
    "{name} is {late} past due. The checkbox is starting to take it personally.",
]

DUE_SOON = [
    "{name} is due {when}. Now would be a dramatic time to start.",
    "{klass}: {name} lands {when}. Coffee is not a strategy, but it's a start.",
    "{name}, due {when}. Nothing sharpens focus like a deadline breathing on your neck.",
    "Reminder that {name} exists and is due {when}. You're welcome.",
    "{name} arrives {when}. Future you would love a head start.",
]

PENDING = [
    "{pending} pending and {name} leads the parade. Checkboxes napping again.",
    "{klass} is quietly accumulating homework. {name} says hi.",
    "{name} is still waiting patiently. Patience has limits.",
    "Assignments multiplying; checkboxes napping. {name} sends regards.",
    "Your {klass} list has opinions about your free time. Start with {name}.",
]

EMPTY_DAY = [
    "Nothing pending. Suspicious, but congratulations.",
    "Inbox of obligations: empty. Savor it before it notices.",
    "All checked off. Try not to invent new work out of boredom.",
    "Zero assignments due. Rest is also productive, allegedly.",
]

EMPTY_WORLD = [
    "Universe vast; your to-do list vaster.",
    "Somewhere, a meeting is being scheduled to discuss another meeting.",
    "The printer senses fear. Plan accordingly.",
    "Every 'quick question' is a thirty-minute commitment in disguise.",
    "Wi-Fi strongest exactly where you can't sit. Physics is petty.",
]

POOLS = {
    'overdue': OVERDUE,
    'due_soon': DUE_SOON,
    'pending': PENDING,
    'empty_day': EMPTY_DAY,
    'empty_world': EMPTY_WORLD,
}
