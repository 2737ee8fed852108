from gitodb.cli import main

HELLO_OID = 'ce013625030ba8dba906f756967f9e9ca394464a'


def run(root, *args):
    return main(['-C', str(root), *args])


def test_init(tmp_path, capsys):
    root = tmp_path / '.gitodb'
    assert run(root, 'init') == 0
    assert 'Initialized empty gitodb repository' in capsys.readouterr().out
    assert (root / 'objects').is_dir()


def test_hash_object_and_cat_file(tmp_path, capsys):
    root = tmp_path / '.gitodb'
    run(root, 'init')
    hello = tmp_path / 'hello.txt'
    hello.write_bytes(b'hello\n')
    capsys.readouterr()

    assert run(root, 'hash-object', '-w', str(hello)) == 0
    assert capsys.readouterr().out == f'{HELLO_OID}\n'

    assert run(root, 'cat-file', '-t', HELLO_OID) == 0
    assert capsys.readouterr().out == 'blob\n'
    assert run(root, 'cat-file', '-s', HELLO_OID) == 0
    assert capsys.readouterr().out == '6\n'
    assert run(root, 'cat-file', '-p', HELLO_OID) == 0
    assert capsys.readouterr().out == 'hello\n'
    assert run(root, 'cat-file', '--type', 'blob', HELLO_OID) == 0
    assert capsys.readouterr().out == 'hello\n'
    assert run(root, 'cat-file', '-e', HELLO_OID) == 0


def test_hash_object_without_write(tmp_path, capsys):
    root = tmp_path / '.gitodb'
    run(root, 'init')
    hello = tmp_path / 'hello.txt'
    hello.write_bytes(b'hello\n')

    assert run(root, 'hash-object', str(hello)) == 0
    assert run(root, 'cat-file', '-e', HELLO_OID) == 1


def test_cat_file_continues_after_failures(tmp_path, capsys):
    root = tmp_path / '.gitodb'
    run(root, 'init')
    hello = tmp_path / 'hello.txt'
    hello.write_bytes(b'hello\n')
    run(root, 'hash-object', '-w', str(hello))
    capsys.readouterr()

    assert run(root, 'cat-file', '-t', 'nothex', '0' * 40, HELLO_OID) == 1
    captured = capsys.readouterr()
    assert captured.out == 'blob\n'
    assert 'Not a valid object id' in captured.err
    assert f'Object not found: {"0" * 40}' in captured.err


def test_cat_file_outside_repo(tmp_path, capsys):
    assert run(tmp_path / 'missing', 'cat-file', '-p', HELLO_OID) == 1
    assert 'Not an initialized repository' in capsys.readouterr().err


def test_hash_object_missing_file(tmp_path, capsys):
    root = tmp_path / '.gitodb'
    run(root, 'init')
    assert run(root, 'hash-object', str(tmp_path / 'nope')) == 1
    assert 'error:' in capsys.readouterr().err


def test_hash_object_bad_tree_does_not_stop_batch(tmp_path, capsys):
    root = tmp_path / '.gitodb'
    run(root, 'init')
    bad = tmp_path / 'bad-tree'
    bad.write_bytes(b'100644 a\x00' + b'\x01' * 20 + b'40000 a\x00' + b'\x02' * 20)
    good = tmp_path / 'good-tree'
    good.write_bytes(b'100644 hello.txt\x00' + bytes.fromhex(HELLO_OID))
    capsys.readouterr()

    assert run(root, 'hash-object', '-w', '-t', 'tree', str(bad), str(good)) == 1
    captured = capsys.readouterr()
    assert 'duplicate entry names' in captured.err
    assert len(captured.out.split()) == 1
