"""
pwmatch.frequency_lists

Ranked dictionaries used by the dictionary-style matchers.

A ranked dictionary maps a lower-cased word to its 1-based popularity rank.
The built-in lists are small offline samples ordered most-common first;
larger lists can be loaded from plain text files with load_ranked_dict().
"""

import logging
import os
import string
from functools import lru_cache
from typing import Dict, Iterable

_LOGGER = logging.getLogger(__name__)

USER_INPUTS = "user_inputs"

RankedDict = Dict[str, int]
RankedDicts = Dict[str, RankedDict]

# case folding that never changes string length, so indexes stay aligned
_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)

_PASSWORDS = """
123456 password 12345678 qwerty 123456789 12345 1234 111111 1234567 dragon
123123 baseball abc123 football monkey letmein 696969 shadow master 666666
qwertyuiop 123321 mustang 1234567890 michael 654321 superman 1qaz2wsx 7777777
121212 000000 qazwsx 123qwe killer trustno1 jordan jennifer zxcvbnm asdfgh
hunter buster soccer harley batman andrew tigger sunshine iloveyou 2000
charlie robert thomas hockey ranger daniel starwars klaster 112233 george
computer michelle jessica pepper 1111 zxcvbn 555555 11111111 131313 freedom
777777 pass maggie 159753 aaaaaa ginger princess joshua cheese amanda summer
love ashley nicole chelsea biteme matthew access yankees 987654321 dallas
austin thunder taylor matrix william corvette hello martin heather secret
merlin diamond 1234qwer gfhjkm hammer silver 222222 88888888 anthony justin
test bailey q1w2e3r4t5 patrick internet scooter orange 11111 golfer cookie
richard samantha bigdog guitar jackson whatever mickey chicken sparky snoopy
maverick phoenix camaro peanut morgan welcome falcon cowboy ferrari samsung
andrea smokey steelers joseph mercedes dakota arsenal eagles melissa boomer
booboo spider nascar monster tigers yellow xxxxxx 123123123 gateway marina
diablo bulldog qwer1234 compaq purple hardcore banana junior hannah 123654
porsche lakers iceman money cowboys 987654 london tennis 999999 ncc1701
coffee scooby 0000 miller boston q1w2e3r4 brandon yamaha chester mother
forever johnny edward 333333 oliver redsox player nikita knight fender
barney midnight please brandy chicago badboy slayer rangers charles angel
flower bigdaddy rabbit wizard bigdick jasper enter rachel chris steven
winner adidas victoria natasha 1q2w3e4r jasmine winter prince panties marine
ghbdtn fishing cocacola casper james 232323 raiders 888888 marlboro gandalf
asdfasdf crystal 87654321 12344321 golden 8675309 admin passw0rd p@ssw0rd
""".split()

_ENGLISH_WIKIPEDIA = """
the of and in was is for as on with by he at from his an were are which
this also be had or has first their one its new after but who not they have
her she two been other when there all during into school time may years
more most only over city some world would where later up such used many can
state about national out known university united then made three de through
between american team film year part people county later under while
government these being season well since both first war city second league
north south east west home house music game word water love door story
light night sun moon star fire earth stone river summer winter spring dream
heart power magic secret shadow dragon tiger eagle angel queen king prince
princess monkey horse rabbit cookie flower apple orange banana cherry lemon
purple yellow silver golden black white green blue red pink brown
correct horse battery staple super man woman girl boy friend family money
happy lucky sunny hello welcome forever freedom pass word letter
""".split()

_FEMALE_NAMES = """
mary patricia linda barbara elizabeth jennifer maria susan margaret dorothy
lisa nancy karen betty helen sandra donna carol ruth sharon michelle laura
sarah kimberly deborah jessica shirley cynthia angela melissa brenda amy
anna rebecca virginia kathleen pamela martha debra amanda stephanie carolyn
christine marie janet catherine frances ann joyce diane alice julie heather
teresa doris gloria evelyn jean cheryl mildred katherine joan ashley judith
rose janice kelly nicole judy christina kathy theresa beverly denise tammy
irene jane lori rachel marilyn andrea kathryn louise sara anne jacqueline
wanda bonnie julia ruby lois tina phyllis norma paula diana annie lillian
emily robin peggy crystal gladys rita dawn connie florence tracy edna
""".split()

_MALE_NAMES = """
james john robert michael william david richard charles joseph thomas
christopher daniel paul mark donald george kenneth steven edward brian
ronald anthony kevin jason matthew gary timothy jose larry jeffrey frank
scott eric stephen andrew raymond gregory joshua jerry dennis walter patrick
peter harold douglas henry carl arthur ryan roger joe juan jack albert
jonathan justin terry gerald keith samuel willie ralph lawrence nicholas roy
benjamin bruce brandon adam harry fred wayne billy steve louis jeremy aaron
randy howard eugene carlos russell bobby victor martin ernest phillip todd
jesse craig alan shawn clarence sean philip chris johnny earl jimmy antonio
""".split()

_SURNAMES = """
smith johnson williams jones brown davis miller wilson moore taylor anderson
thomas jackson white harris martin thompson garcia martinez robinson clark
rodriguez lewis lee walker hall allen young hernandez king wright lopez hill
scott green adams baker gonzalez nelson carter mitchell perez roberts turner
phillips campbell parker evans edwards collins stewart sanchez morris rogers
reed cook morgan bell murphy bailey rivera cooper richardson cox howard ward
torres peterson gray ramirez james watson brooks kelly sanders price bennett
wood barnes ross henderson coleman jenkins perry powell long patterson hughes
flores washington butler simmons foster gonzales bryant alexander russell
""".split()

_US_TV_AND_FILM = """
you i to the a and that it of me what is in this know i'm for no have my
don't just not do be on your was we it's with so but all well are he oh
about right you're get here out going like yeah if her she can up want
think that's now go him at how got there one did why see come good they
really as would look when time will okay back can't mean tell i'll from hey
were he's could didn't yes his been or something who because some had then
say ok take an way us little make need gonna never we're too love she's
matrix starwars batman superman gandalf hogwarts skywalker vader jedi
""".split()

_BUILTIN_LISTS = {
    "passwords": _PASSWORDS,
    "english_wikipedia": _ENGLISH_WIKIPEDIA,
    "female_names": _FEMALE_NAMES,
    "male_names": _MALE_NAMES,
    "surnames": _SURNAMES,
    "us_tv_and_film": _US_TV_AND_FILM,
}


def ascii_lower(s: str) -> str:
    """Lower-case A-Z only. Dictionary keys and lookups both fold this way."""
    return s.translate(_ASCII_LOWER)


def build_ranked_dict(ordered_list: Iterable[str]) -> RankedDict:
    """Rank words by position (1 = first). Repeats keep their first rank."""
    result: RankedDict = {}
    for word in ordered_list:
        word = ascii_lower(word)
        if word not in result:
            result[word] = len(result) + 1
    return result


@lru_cache(maxsize=None)
def _builtin_ranked_dicts() -> RankedDicts:
    return {name: build_ranked_dict(words) for name, words in _BUILTIN_LISTS.items()}


def default_ranked_dicts() -> RankedDicts:
    """
    Return the built-in ranked dictionaries.

    The outer mapping is a fresh dict so callers may add their own tags;
    the inner ranked dicts are shared and must not be mutated.
    """
    return dict(_builtin_ranked_dicts())


def load_ranked_dict(path: str) -> RankedDict:
    """
    Read a word list file: one word per line, most common first.
    Blank lines and '#' comments are skipped; anything after the first
    whitespace (e.g. a frequency count column) is ignored.
    """
    words = []
    with open(os.path.expanduser(path), "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            words.append(line.split()[0])
    ranked = build_ranked_dict(words)
    _LOGGER.debug("loaded %d words from %s", len(ranked), path)
    return ranked
